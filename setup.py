"""
Setup script for the serviceagent package.
"""

from pathlib import Path

from setuptools import find_packages, setup

# Read requirements.txt
requirements_path = Path(__file__).parent / "requirements" / "requirements.txt"
with open(requirements_path, "r") as f:
    # Filter out comments and empty lines
    install_requires = []
    for line in f:
        line = line.strip()
        if line and not line.startswith("#"):
            install_requires.append(line)

# Read long description from README.md if it exists
long_description = ""
readme_path = Path(__file__).parent / "README.md"
if readme_path.exists():
    with open(readme_path, "r") as f:
        long_description = f.read()

setup(
    name="serviceagent",
    version="0.2.0",
    description="Plan-based feature gating and rule-based lead scoring for ServiceAgent",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["serviceagent", "serviceagent.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.11.1",
        ],
    },
    entry_points={
        "console_scripts": [
            "serviceagent=serviceagent.cli.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Topic :: Software Development :: Libraries",
    ],
)
