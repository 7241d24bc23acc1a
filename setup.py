"""
mantafs - Setup Configuration

A hierarchical filesystem interface for the Manta object store: path
resolution, metadata mapping and lazy directory listings over flat,
HTTP-addressed object keys.

License: Apache-2.0
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Core dependencies (DEFAULT installation)
core_deps = [
    # Configuration
    "pydantic>=2.11.9",
    # Timestamp parsing for HEAD and listing responses
    "python-dateutil>=2.9.0",
]

# Development dependencies
dev_deps = [
    # Testing
    "pytest>=8.4.1",
    "pytest-mock>=3.14.1",
    "pytest-cov>=6.2.1",
    # Code quality
    "black>=25.0.0",
    "flake8>=7.1.0",
    "mypy>=1.13.0",
]

setup(
    name="mantafs",
    version="0.1.0",

    # Package description
    description="Hierarchical filesystem interface for the Manta object store",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package discovery
    packages=find_packages(where="src"),
    package_dir={"": "src"},

    # Python version requirement
    python_requires=">=3.11",

    # Dependencies
    install_requires=core_deps,

    # Optional dependencies (extras)
    extras_require={
        # Core alias (same as default)
        "core": core_deps,

        # Development: testing + code quality
        "dev": core_deps + dev_deps,
        "test": ["pytest>=8.4.1", "pytest-mock>=3.14.1", "pytest-cov>=6.2.1"],
    },

    # PyPI classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: System :: Filesystems",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],

    # Keywords for PyPI search
    keywords=["manta", "object-store", "filesystem", "storage"],

    # License
    license="Apache-2.0",

    # Package data
    include_package_data=True,
    zip_safe=False,
)
