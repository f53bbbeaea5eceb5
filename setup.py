# setup.py
from setuptools import setup, find_packages

setup(
    name="ar_model_viewer",
    version="0.1.0",
    description="3D model upload, QR link codes and AR / 3D viewer backend",
    author="Swift Fox",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "data",
            "public",
            "build",
            "dist",
        )
    ),
    py_modules=["app", "models"],
    install_requires=[
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "pydantic>=2.0",
        "python-multipart>=0.0.6",
        "requests>=2.31",
        "qrcode>=7.4",
        "Pillow>=10.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    python_requires=">=3.10",
)
