# setup.py
from setuptools import setup, find_packages

# Read requirements
with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="extension-recommender",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
            "onnx>=1.14",
            "httpx>=0.24",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "extension-recommender=extension_recommender.cli.main:main",
        ],
    },
)
