# setup.py
from setuptools import setup, find_packages

setup(
    name="fusion_systems",
    version="0.1.0",
    description="Fusion systems on finite p-groups",
    packages=find_packages(include=["fusion_systems", "fusion_systems.*"]),
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.8",
)
