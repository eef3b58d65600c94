# -*- coding: utf-8 -*-
from setuptools import setup

packages = \
['tzwire',
 'tzwire.transport']

install_requires = \
['hidapi>=0.14.0',
 'libusb1>=1.7,<4',
 'mnemonic>=0,<1',
 'protobuf>=4.23.3,<6.0.0',
 'semver>=3.0.1,<4.0.0']

entry_points = \
{'console_scripts': ['tzwire = tzwire._cli:main']}

setup_kwargs = {
    'name': 'tzwire',
    'version': '0.3.0',
    'description': 'A client for the Trezor hardware wallet USB wire protocol',
    'long_description': "# tzwire\n\ntzwire is a Python library and command line tool that talks to a Trezor hardware wallet over USB.\nIt frames protobuf messages into USB reports, answers button, PIN and passphrase requests,\nand derives Bitcoin and Ethereum addresses and extended public keys.\n\n## Prerequisites\n\nPython 3 and libusb are required. For Ubuntu/Debian:\n\n```\nsudo apt install libusb-1.0-0-dev libudev-dev python3-dev\n```\n\n## Usage\n\n```\ntzwire enumerate\ntzwire -i getaddress \"m/44'/0'/0'/0/0\" --coin btc\n```\n\nAll output will be in JSON form and sent to `stdout`.\nPrompts for the PIN and passphrase are sent to `stderr`.\n\n## Tests\n\n```\ncd test\n./run_tests.py\n```\n\n## License\n\nThis project is available under the MIT License.\n",
    'author': 'The tzwire developers',
    'maintainer': 'None',
    'maintainer_email': 'None',
    'packages': packages,
    'install_requires': install_requires,
    'entry_points': entry_points,
    'python_requires': '>=3.8',
}


setup(**setup_kwargs)
