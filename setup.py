"""
Setup configuration for the swift-reformat package.

This script uses setuptools to package and distribute the swift-reformat
library. It also reads the requirements and long description directly
from external files for ease of maintenance.
"""
from setuptools import find_packages, setup

VERSION = "0.1.0"


def read_requirements():
    """
    Read requirements from requirements.txt file.
    """
    with open("requirements.txt", encoding="UTF-8") as file:
        return [line.strip() for line in file if line.strip() and not line.startswith("#")]


def get_long_description():
    """
    Read README.md file.
    """
    with open("README.md", encoding="utf8") as file:
        return file.read()


setup(
    name="swift-reformat",
    description="Re-indent and normalize spacing in Swift source files.",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="Apache Licence, Version 2.0",
    version=VERSION,
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest", "hypothesis>=6.100", "atheris"],
    },
    entry_points={
        "console_scripts": [
            "swift-reformat=swift_reformat.cli:cli",
        ]
    },
    python_requires=">=3.11",
)
