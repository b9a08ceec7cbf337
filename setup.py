from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="bigbatch-sgd",
    version="0.1.0",
    description="Adaptive stepsize control for big-batch stochastic gradient descent",
    packages=find_packages(include=["bigbatch_sgd", "bigbatch_sgd.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.21",
        "pyyaml>=5.4",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
