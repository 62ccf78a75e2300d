#!/usr/bin/env python3
"""
Aino Framework Setup
Middleware-pipeline web framework with cookie sessions and CSRF protection
"""

from setuptools import setup, find_packages
from pathlib import Path


def get_version():
    """Get version from __init__.py"""
    version_file = Path(__file__).parent / "src" / "aino" / "__init__.py"
    if version_file.exists():
        with open(version_file, 'r') as f:
            for line in f:
                if line.startswith("__version__"):
                    return line.split("=")[1].strip().strip('"\'')
    return "0.1.0"


def read_readme():
    """Read README file"""
    readme_path = Path(__file__).parent / "README.md"
    if readme_path.exists():
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return ""


install_requires = [
    "cryptography>=3.4.0",    # AES-GCM encrypted cookie sessions
    "hypercorn>=0.14.0",      # ASGI server
]

extras_require = {
    # Development tools
    "dev": [
        "pytest>=7.0.0",
        "pytest-asyncio>=0.21.0",
        "pytest-cov>=3.0.0",
        "httpx>=0.24.0",
        "faker>=15.0.0",
        "black>=21.0.0",
        "isort>=5.0.0",
        "flake8>=3.9.0",
        "mypy>=0.910",
    ],
}

extras_require["all"] = [
    dep for deps in extras_require.values() for dep in deps
]

setup(
    name="aino",
    version=get_version(),
    author="Aino Team",
    description="Middleware-pipeline Python web framework",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
        "Framework :: AsyncIO",
    ],
    keywords="web framework middleware session csrf asgi",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "aino=aino.cli:main",
        ],
    },
    zip_safe=False,
)
