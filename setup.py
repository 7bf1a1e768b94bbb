"""Setup configuration for modelspec package."""
from setuptools import setup, find_packages

setup(
    name="modelspec",
    version="0.1.0",
    description="One interface over many regression and classification engines",
    packages=find_packages(where=".", include=["modelspec", "modelspec.*"]),
    package_dir={"": "."},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas",
        "scikit-learn",
        "statsmodels",
        "patsy",
        "joblib",
    ],
    extras_require={
        "boost": ["xgboost", "lightgbm"],
        "test": ["pytest"],
    },
)
