from setuptools import setup, find_packages

setup(
    name="oci-mcp-server",
    version="0.1.0",
    description="OCI MCP Server — Oracle Cloud Infrastructure resource tools for MCP clients",
    author="OCI MCP Server",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["oci_mcp_server"],
    install_requires=[
        "oci>=2.120.0",
        "mcp>=1.2.0,<2",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "pytest-asyncio>=0.23"],
    },
    entry_points={
        "console_scripts": [
            "oci-mcp-server=oci_mcp_server:main",
        ],
    },
)
