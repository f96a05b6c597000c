from setuptools import find_packages, setup

setup(
    name="jenkins-hooks",
    version="0.1.0",
    packages=find_packages(
        include=[
            "hooks_common",
            "hooks_common.*",
            "hooks_server",
            "hooks_server.*",
            "hooks_admin",
            "hooks_admin.*",
        ]
    ),
    install_requires=[
        "requests>=2.31.0",
        "fastapi>=0.104.0",
        "uvicorn>=0.24.0",
        "click>=8.1.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "jenkins-hooks=hooks_server.__main__:main",
            "jenkins-hooks-admin=hooks_admin.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
