from setuptools import setup, find_packages

setup(
    name="alpha_beta_light",
    version="0.1",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
