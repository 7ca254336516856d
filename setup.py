from setuptools import setup, find_packages

setup(
    name="kcomplexity",
    version="1.0.0",
    description="K-mer complexity scoring, masking and filtering for sequencing reads",
    long_description="Scores DNA/RNA reads by the density of distinct k-mers and uses the score to report, mask low-complexity regions, or filter low-complexity records",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
    'biopython>=1.83',
    'click>=8.1',
    'numpy>=1.24.4',
    'pandas>=2.0.3',
    'PyYAML>=6.0',
    ],
    extras_require={
        "plot": [
            "matplotlib>=3.7",
            "seaborn>=0.13",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kcomplexity=kcomplexity.cli.main:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Operating System :: OS Independent",
    ],
    )
