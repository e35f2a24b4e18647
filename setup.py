"""
Setup script for pokercoach.

pokercoach is the adaptive practice scheduler behind the poker
hand-decision trainer. It decides:

1. What to practice - weekly focus leak tags
2. How hard - difficulty tier per leak tag
3. Which mix - action decision vs raise sizing drills
4. When again - fixed-interval spaced repetition

The 'pokercoach' command exposes the scheduler for operators.
"""

from setuptools import find_packages, setup

setup(
    name="pokercoach",
    version="1.0.0",
    description="Adaptive practice scheduler for poker hand-decision drills",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="PokerCoach",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0,<0.27",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        "psycopg2-binary>=2.9.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pokercoach=pokercoach.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
    ],
    keywords="poker training spaced-repetition scheduler",
)
