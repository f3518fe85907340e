"""
Setup script for the screenpilot automation command pipeline.
"""

from setuptools import setup, find_packages

setup(
    name="screenpilot",
    version="0.1.0",
    description="Text-driven GUI automation pipeline with UI state tracking",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Screenpilot Team",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0.0",
        "pyautogui>=0.9.54",
        "pyperclip>=1.8.0",
        "python-dotenv>=1.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "screenpilot=screenpilot.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
