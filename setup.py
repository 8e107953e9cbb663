"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='icebox',
	author='Beth Kjos',
	author_email='kjosib@gmail.com',
	version='0.1.0',
	packages=['icebox'],
	entry_points={
		'console_scripts': ["icebox = icebox.cmdline:main"],
	},
	license='MIT',
	description='Freeze parsed syntax trees into Python modules that rebuild them on import',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.12",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Code Generators",
		"Topic :: Software Development :: Compilers",
		"Environment :: Console",
    ],
	python_requires='>=3.11',
	install_requires=[
		"booze-tools>=0.6.2.1",
		"numpy>=1.26",
	]
)
