"""prompt-splicer: split long prompts into editable segments and recombine them."""

__version__ = '0.1.0'
