from pathlib import Path

from setuptools import setup, find_packages

HERE = Path(__file__).resolve().parent


def parse_requirements(filename):
    """Tries to read a requirements file and returns a list of dependencies"""
    try:
        with open(HERE / filename, 'r') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    except IOError:
        return []

# Parse requirements files
install_requires = parse_requirements('requirements.txt')
dev_requires = parse_requirements('requirements-dev.txt')

setup(
    name='gcloud-mcp',
    version='0.1.0',
    description='MCP server that lets AI agents run gcloud commands under an access control list',
    packages=find_packages(include=['gcloud_mcp', 'gcloud_mcp.*']),
    install_requires=install_requires,
    extras_require={
        'dev': dev_requires,
        'test': dev_requires,
    },
    entry_points={
        'console_scripts': [
            'gcloud-mcp=gcloud_mcp.mcp.server:main',
        ],
    },
    python_requires='>=3.11',
)
