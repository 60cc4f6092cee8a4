import setuptools

setuptools.setup(
	name='commandeer',
	version='0.1.0.0',
	packages=[
		'commandeer',
		'commandeer.support',
	],
	package_data={'commandeer': ['commands.spec']},
	description='A table-driven parser for human-typed commands, such as window manager key bindings',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	python_requires='>=3.9',
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Topic :: Software Development :: Interpreters",
		"Development Status :: 3 - Alpha",
	],
)
