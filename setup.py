"""Setup script for virtual-he package."""

from setuptools import setup, find_packages

setup(
    name="virtual-he",
    version="0.1.0",
    description="Make virtual H&E images from fluorescent microscopy images",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "matplotlib>=3.5.0",
        "opencv-python>=4.5.0",
        "pyyaml>=6.0",
        "click>=8.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "virtual-he=virtual_he.cli.generate:main",
        ],
    },
)
