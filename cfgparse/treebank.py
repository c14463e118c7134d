"""Read treebanks in bracket notation.

Trees may span multiple lines, as in the Penn treebank; a tree ends when its
brackets are balanced. For example::

	( (S (NP-SBJ (NNP John))
		(VP (VBZ is) (ADJP (JJ rich))) (. .)) )
"""
import re
import logging
from .tree import Tree
from .util import openread

# a closing bracket followed by whitespace before the next closing bracket
SUPERFLUOUSSPACERE = re.compile(r'\)\s+(?=\))')


def brackettrees(lines, unwrap=True):
	"""Yield the trees from an iterable of lines in bracket notation.

	:param unwrap: if True, the root node of a tree with an empty label and a
		single child, such as ``( (S ...) )``, is removed.
	:raises ValueError: for unbalanced brackets or malformed trees.

	>>> for tree in brackettrees(['( (S (NP Mary)', '  (VP walks)) )',
	...		'(S (NP John) (VP runs))']):
	...		print(tree)
	(S (NP Mary) (VP walks))
	(S (NP John) (VP runs))"""
	block = []
	parens = 0  # number of open brackets
	for n, line in enumerate(lines, 1):
		if not line.strip():
			continue
		block.append(line.strip())
		parens += line.count('(') - line.count(')')
		if parens < 0:
			raise ValueError('unbalanced brackets at line %d: %r' % (n, line))
		elif parens == 0:
			yield _parsetree(' '.join(block), unwrap)
			block = []
	if block:
		raise ValueError('unexpected end of input, unbalanced brackets:\n%s'
				% '\n'.join(block))


def _parsetree(block, unwrap):
	tree = Tree.parse(SUPERFLUOUSSPACERE.sub(')', block))
	if (unwrap and not tree.label and len(tree) == 1
			and isinstance(tree[0], Tree)):
		tree = tree.pop()
	return tree


def readbrackettrees(filename, encoding='utf8', unwrap=True):
	"""Read all trees in a bracket treebank file.

	:returns: a list of trees."""
	with openread(filename, encoding=encoding) as inp:
		trees = list(brackettrees(inp, unwrap))
	logging.info('read %d trees from %s', len(trees), filename)
	return trees


__all__ = ['brackettrees', 'readbrackettrees']
