from setuptools import setup, find_packages

setup(
    name="distmap",
    version="0.1.0",
    packages=find_packages(include=["distmap", "distmap.*"]),
    install_requires=[
        "numpy",
        "torch>=1.9.0",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    author="Volume Cartographer Team",
    author_email="info@volumecartographer.com",
    description="Chamfer distance transforms for 2D images and 3D volumes",
    keywords="distance transform, chamfer, morphology, segmentation",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Image Processing",
    ],
    python_requires=">=3.8",
)
