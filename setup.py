"""Setup configuration for timebreakdown"""

from setuptools import setup, find_packages

setup(
    name="feedback-time-breakdown",
    version="0.1.0",
    description=(
        "Reconstruct staff working time from admin feedback timestamps: "
        "session blocks, period rollups and per-artist summaries."
    ),
    author="Feedback Time Breakdown Contributors",
    author_email="",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "feedback-time-breakdown=timebreakdown.main:main",
        ],
    },
)
