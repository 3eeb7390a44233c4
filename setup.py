from setuptools import setup, find_packages

setup(
    name="nfc-type2-tools",
    version="0.1.0",
    packages=find_packages(exclude=["tests"]),
    py_modules=["main"],
    install_requires=[
        "pyscard",  # Used for NFC reader operations
        "ndeflib",  # Used for describing NDEF records of other types
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    python_requires=">=3.8",
)
