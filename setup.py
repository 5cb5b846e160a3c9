import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

with open("mpnum/version.py", "r") as fh:
    version = fh.read().strip().strip('"')

setuptools.setup(
    name="mpnum",
    version=version,
    author="Bob Stein",
    author_email="bob.stein@qiki.info",
    description="Multiple precision integers, rationals, reals and complex numbers, with rounding contexts.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/BobStein/mpnum",
    packages=setuptools.find_packages(),
    platforms=['any'],
    python_requires='>=3.6',
    install_requires=[
        'mpmath>=1.1,<1.4',
    ],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
            # arbitrary precision
            # floating point, rounding, IEEE 754
            # rational numbers
    ],
)
