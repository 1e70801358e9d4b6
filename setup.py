#!/usr/bin/env python
"""Setup script for the bfjson library."""
from pathlib import Path
from setuptools import setup, find_packages

# project root
here = Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

version = "0.1.0"

setup(
    name="bfjson",
    version=version,
    description="Compact JSON wire format for plain and counting Bloom filters",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="bloom-filter counting-bloom-filter json serialization",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples"]),
    python_requires=">=3.9",

    # runtime dependencies
    install_requires=[
        "numpy>=1.21.0",
        "orjson>=3.8.0",
        "xxhash>=3.0.0",
        "mmh3>=4.0.0",
    ],

    # optional dependencies
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
            "hypothesis>=6.0.0",
        ],
    },

    # CLI entry point
    entry_points={
        "console_scripts": [
            "bfjson=bfjson.cli:main",
        ],
    },

    package_data={
        "bfjson": ["py.typed"],
    },
    include_package_data=True,
    zip_safe=True,
)
