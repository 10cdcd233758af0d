"""
Setup script for KATOTTG Geo application.
"""

from setuptools import setup, find_packages

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

# Separate development requirements
dev_requirements = [req for req in requirements if any(dev in req for dev in ["pytest", "black", "flake8", "mypy", "sphinx"])]
install_requirements = [req for req in requirements if req not in dev_requirements]

setup(
    name="katottg-geo",
    version="1.0.0",
    author="Data Analytics Team",
    description="Compaction and query tools for the KATOTTG administrative division codifier",
    long_description="KATOTTG Geo - converts the flat Ukrainian administrative division dataset into a compact index-based snapshot and serves read-only lookups over regions, districts, communities and settlements.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=install_requirements,
    extras_require={
        "dev": dev_requirements,
        "test": dev_requirements,
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "katottg-geo=main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
