from setuptools import setup, find_packages

setup(
    name="color_clash",
    version="0.1",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "tqdm",
        "rich",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
