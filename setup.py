"""
Nuclear Option Mod Manager package setup.
"""

from pathlib import Path

from setuptools import setup, find_packages

here = Path(__file__).parent

with open(here / "README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open(here / "requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="nomm",
    version="1.0.0",
    description="Mod installation engine for Nuclear Option (BepInEx)",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["nomm", "nomm.*"], exclude=["nomm.tests", "nomm.tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Games/Entertainment",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
        ]
    },
)
