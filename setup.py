"""mctree のパッケージ定義

使用方法:
    pip install -e ".[test]"
"""

from setuptools import find_packages, setup

setup(
    name="mctree",
    version="0.1.0",
    description="Monte Carlo Tree Search engine for two-player zero-sum games",
    packages=find_packages(include=["mctree", "mctree.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
