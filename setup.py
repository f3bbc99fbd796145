from setuptools import setup, find_packages

setup(
    name="hll-count",
    version="0.1.0",
    description="Approximate distinct-line counting with HyperLogLog",
    author="adamfilli",
    packages=find_packages(include=["hllcount", "hllcount.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["hllcount=hllcount.cli:main"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
