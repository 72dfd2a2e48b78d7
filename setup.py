"""Setup script for the OpenAI Assistants MCP server."""

from setuptools import setup, find_packages
import os

# Read the README file
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "OpenAI Assistants MCP Server - Model Context Protocol server for the OpenAI Assistants API"

setup(
    name='openai-assistants-mcp',
    version='0.1.0',
    description='MCP (Model Context Protocol) server exposing the OpenAI Assistants API as tools',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    author='OpenAI Assistants MCP Team',
    author_email='dev@example.com',
    url='https://github.com/your-org/openai-assistants-mcp',

    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.11',
    install_requires=[
        'requests>=2.31.0',
        'pydantic>=2.0.0',
        'click>=8.1.0',
        'python-dotenv>=1.0.0',
        'PyYAML>=6.0',
        'mcp>=1.10.0,<2',
    ],

    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.21.0',
            'pytest-cov>=4.1.0',
            'requests-mock>=1.11.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.5.0',
        ],
    },

    entry_points={
        'console_scripts': [
            'openai-assistants-mcp=openai_assistants_mcp.cli:main',
        ],
    },

    package_data={
        'openai_assistants_mcp': [
            'mcp_server/resources/content/*/*.json',
            'mcp_server/resources/content/*/*.md',
            'mcp_server/resources/content/*/*/*.md',
        ],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Libraries',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],

    keywords='openai assistants mcp model-context-protocol json-rpc ai',

    project_urls={
        'Bug Reports': 'https://github.com/your-org/openai-assistants-mcp/issues',
        'Source': 'https://github.com/your-org/openai-assistants-mcp',
    },

    include_package_data=True,
    zip_safe=False,
)
