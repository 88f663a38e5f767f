from setuptools import setup, find_packages

setup(
    name="floating_rate_engine",
    version="0.1.0",
    description="Floating-rate loan amortization and pricing engine",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pandas>=1.5",
        "scipy",
        "pydantic>=2",
        "pydantic-settings",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",
)
