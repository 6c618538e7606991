from pathlib import Path

from setuptools import find_namespace_packages, setup

# Load packages from requirements.txt
BASE_DIR = Path(__file__).parent
with open(Path(BASE_DIR, "requirements.txt")) as file:
    required_packages = [
        ln.strip() for ln in file.readlines() if ln.strip() and not ln.startswith("#")
    ]

# Define our package
setup(
    name="kotoba",
    version="0.1.0",
    description="Japanese vocabulary companion core: lessons, quizzes, learner progress and search",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["kotoba", "kotoba.*"]),
    package_data={
        "kotoba": ["schemas/*.json", "catalog/*.json"],
    },
    include_package_data=True,
    install_requires=required_packages,
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
