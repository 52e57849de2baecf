#!/usr/bin/env python
"""Setup script for the engine-equiv checker."""
from pathlib import Path
from setuptools import setup, find_packages

# project root
here = Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

version = "0.1.0"

setup(
    name="engine-equiv",
    version=version,
    author="YC Math",
    author_email="your-email@example.com",
    description="Differential JSON encoding-equivalence checker for execution engine API objects",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Testing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="ethereum engine-api json fuzzing differential-testing",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples"]),
    python_requires=">=3.9",

    # core dependencies
    install_requires=[
        "orjson>=3.8.0",
        "xxhash>=3.0.0",
        "web3>=6.0.0",
        "rlp>=3.0.0",
        "tqdm>=4.65.0",
    ],

    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
            "hypothesis>=6.0.0",
            "black>=22.0.0",
            "isort>=5.10.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
        "test": [
            "pytest>=7.0.0",
            "hypothesis>=6.0.0",
        ],
    },

    # CLI entry point
    entry_points={
        "console_scripts": [
            "engine-equiv=engine_equiv.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=True,
)
