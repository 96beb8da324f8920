from setuptools import setup, find_packages

setup(
    name="job-tracker",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fpdf2",
        "python-dotenv",
        "pytz",
    ],
    extras_require={
        "test": [
            "pytest",
            "pypdf",
        ],
    },
    entry_points={
        "console_scripts": [
            "job-tracker=jobtracker.tracker:main_cli",
        ],
    },
    description="A CLI tool to track job applications with CSV import and PDF reports",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.8",
)
