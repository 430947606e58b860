from setuptools import find_packages, setup

if __name__ == "__main__":
    setup(
        name="daubinterp",
        version="0.1.0",
        description="Find the best interpolator for Daubechies scaling functions on dyadic grids",
        author="Barry D. Baker",
        license="MIT",
        author_email="barry.baker@noaa.gov",
        packages=find_packages(include=["daubinterp", "daubinterp.*"]),
        python_requires=">=3.9",
        install_requires=[
            "numpy",
            "scipy>=1.13",
            "pandas",
            "xarray",
            "dask[array]",
            "PyWavelets",
        ],
        extras_require={
            "test": ["pytest", "pytest-benchmark"],
            "examples": ["matplotlib"],
        },
        entry_points={
            "console_scripts": ["daubinterp=daubinterp.cli:main"],
        },
    )
