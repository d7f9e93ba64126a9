"""setuptools setup for CapyTimer.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="capytimer",
    version="0.1.0",
    description="Focus/break session timer that rewards completed focus time",
    packages=find_packages(include=["capytimer", "capytimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "SQLAlchemy>=2.0",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["capytimer=capytimer.__main__:main"],
    },
)
