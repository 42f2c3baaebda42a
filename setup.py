#!/usr/bin/env python3
"""
Setup script for the Hand Gesture Classification Engine
"""

from setuptools import setup, find_packages

setup(
    name="gesturespeak",
    version="0.1.0",
    description="Rule-based hand gesture classification and temporal confirmation engine",
    packages=find_packages(include=["gesturespeak", "gesturespeak.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "PyYAML",
        "python-dotenv",
    ],
    extras_require={
        # Camera / microphone adapters used by gesturespeak.main
        "capture": [
            "opencv-python",
            "mediapipe",
            "pyaudio",
        ],
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "gesturespeak=gesturespeak.main:cli",
        ],
    },
)
