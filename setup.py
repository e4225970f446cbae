from setuptools import setup, find_packages

setup(
    name="chinese_whispers",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "scipy",
        "pandas",
        "numba",
        "click",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "chinese-whispers=chinese_whispers.cli:main",
        ],
    },
    description="Chinese Whispers label-propagation clustering for weighted graphs",
    python_requires=">=3.8",
)
