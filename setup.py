from setuptools import setup, find_namespace_packages

setup(
    name="chord-finder",
    version="0.1.0",
    description="Find chord sheets for a song across several chord archives and pull the chord text out of the page",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_namespace_packages(include=["chord_finder", "chord_finder.*"]),
    package_data={"chord_finder.i18n": ["*.json"]},
    install_requires=[
        "beautifulsoup4",
        "colorama>=0.4.6",
        "playwright",
        "regex",
        "requests",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "chord-finder=chord_finder.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Utilities",
    ],
    keywords="chords guitar tabs ultimate-guitar amdm scraper",
)
