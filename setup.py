"""Setup script for cfgparse."""
import sys
from setuptools import setup

from cfgparse import __version__

with open('README.rst') as inp:
	README = inp.read()

REQUIRES = [
		'numpy',  # '>=1.21'
		]
METADATA = dict(name='cfgparse',
		version=__version__,
		description='Context-free grammar parsing with the CYK algorithm',
		long_description=README,
		long_description_content_type='text/x-rst',
		classifiers=[
				'Development Status :: 4 - Beta',
				'Environment :: Console',
				'Intended Audience :: Science/Research',
				'License :: OSI Approved :: GNU General Public License (GPL)',
				'Operating System :: POSIX',
				'Programming Language :: Python :: 3.10',
				'Topic :: Text Processing :: Linguistic',
		],
		packages=['cfgparse'],
		python_requires='>=3.10',
		install_requires=REQUIRES,
		extras_require={'test': ['pytest']},
		entry_points={'console_scripts': ['cfgparse = cfgparse.cli:main']},
	)

if __name__ == '__main__':
	if sys.version_info[:2] < (3, 10):
		raise RuntimeError('Python version 3.10+ required.')
	setup(**METADATA)
