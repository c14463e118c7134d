"""Punctuation conventions for terminal symbols."""

# NB: ' is not in this list of tokens, because if it occurs as a possesive
# marker it should be classified like any other word.
PUNCTUATION = frozenset('.,():-";?/!*&`[]<>{}|=\xab\xbb\xb7\\'
		) | {'..', '...', '....', '!!', '!!!', '??', '???', "''", '``', ',,',
		'--', '---', '-LRB-', '-RRB-', '-LCB-', '-RCB-', '-LSB-', '-RSB-'}


def ispunct(symbol):
	"""Test whether a symbol is a punctuation token.

	>>> ispunct(','), ispunct('-LRB-'), ispunct('NP')
	(True, True, False)"""
	return symbol in PUNCTUATION


__all__ = ['PUNCTUATION', 'ispunct']
