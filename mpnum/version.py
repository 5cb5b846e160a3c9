"""0.0.1.2026.1018.0912.05"""