"""Labeled trees for treebank trees and parse trees."""
# This is an adaptation of the tree.py file from disco-dop, which in turn is
# an adaptation of the original tree.py file from NLTK.
# Original notice:
# Natural Language Toolkit: Text Trees
#
# Copyright (C) 2001-2010 NLTK Project
# Author: Edward Loper <edloper@gradient.cis.upenn.edu>
#         Steven Bird <sb@csse.unimelb.edu.au>
#         Nathan Bodenstab <bodenstab@cslu.ogi.edu> (tree transforms)
# URL: <http://www.nltk.org/>
# For license information, see LICENSE.TXT
import re

# an opening bracket with an optional label, a closing bracket, or a word
TOKENRE = re.compile(r'\(\s*([^\s()]+)?|\)|([^\s()]+)')


class Tree(object):
	"""A mutable, labeled, n-ary tree.

	A tree has a label (a phrasal or part-of-speech symbol) and a list of
	children; a child is either a Tree or a word (a string). A
	part-of-speech node is a Tree with a single word as child.

	A descendant can be addressed with a tree position: ``()`` is the tree
	itself, and ``p + (i, )`` is the i-th child of the node at position p.

	The constructor can be called in two ways:

	- ``Tree(label, children)`` constructs a new tree with the specified label
		and list of children.
	- ``Tree(s)`` parses a tree in bracket notation; equivalent to
		``Tree.parse(s)``.

	Parse trees carry two more attributes: ``prob``, the log probability of
	the subtree for trees produced by a probabilistic parser (None
	otherwise), and ``parent``, which is set by
	``treetransforms.correctparents()``.

	>>> tree = Tree('(S (NP (Det the) (N dog)) (VP barks))')
	>>> tree.leaves()
	['the', 'dog', 'barks']
	>>> print(tree[0])
	(NP (Det the) (N dog))
	>>> tree[0, 1]
	Tree('N', ['dog'])
	"""
	__slots__ = ('label', 'children', 'prob', '_parent')

	def __new__(cls, label_or_str=None, children=None):
		if label_or_str is None:
			return object.__new__(cls)  # used by copy.deepcopy
		if children is None:
			if not isinstance(label_or_str, str):
				raise TypeError('%s: expected a label and child list '
						'or a single string; got: %s' % (
						cls.__name__, type(label_or_str)))
			return cls.parse(label_or_str)
		if isinstance(children, str):
			raise TypeError('%s() argument 2 should be a list, not a '
					'string' % cls.__name__)
		return object.__new__(cls)

	def __init__(self, label_or_str, children=None):
		# Tree(s) already returned an initialized tree from Tree.parse()
		if children is None:
			return
		self.label = label_or_str
		self.children = list(children)
		self.prob = None
		self._parent = None

	def __eq__(self, other):
		return (isinstance(other, Tree) and self.label == other.label
				and self.children == other.children)

	def __ne__(self, other):
		return not self.__eq__(other)

	def append(self, child):
		"""Append ``child`` to this node."""
		self.children.append(child)

	def pop(self, index=-1):
		"""Remove and return the child at index (default last)."""
		return self.children.pop(index)

	def __iter__(self):
		return iter(self.children)

	def __len__(self):
		return len(self.children)

	def __getitem__(self, index):
		if isinstance(index, (int, slice)):
			return self.children[index]
		node = self
		for i in index:
			node = node.children[i]
		return node

	def __setitem__(self, index, value):
		if isinstance(index, (int, slice)):
			self.children[index] = value
		elif not index:
			raise IndexError('the tree position () may not be assigned to.')
		else:
			self[index[:-1]].children[index[-1]] = value

	@property
	def parent(self):
		"""The parent of this node, or None for the root.

		Only valid after ``treetransforms.correctparents()`` has been applied
		to the root of the tree."""
		return self._parent

	def leaves(self):
		""":returns: the words of this tree, from left to right."""
		result = []
		agenda = [self]
		while agenda:
			node = agenda.pop()
			if isinstance(node, Tree):
				agenda.extend(reversed(node.children))
			else:
				result.append(node)
		return result

	def subtrees(self, condition=None):
		"""Yield the nodes of this tree in pre-order.

		:param condition: a function ``Tree -> bool`` to filter which nodes are
			yielded (does not affect whether children are visited).

		Children are looked up after their parent has been yielded; replacing
		the words of a yielded node is safe, other modifications are not."""
		agenda = [self]
		while agenda:
			node = agenda.pop()
			if isinstance(node, Tree):
				if condition is None or condition(node):
					yield node
				agenda.extend(reversed(node.children))

	def treepositions(self, order='preorder'):
		"""Return the tree positions of the nodes and words of this tree.

		:param order: ``'preorder'`` for all positions; ``'leaves'`` for the
			positions of the words only, from left to right.

		>>> Tree('(S (NP Mary) (VP walks))').treepositions('leaves')
		[(0, 0), (1, 0)]"""
		if order not in ('preorder', 'leaves'):
			raise ValueError('unknown order: %r' % order)
		result = [] if order == 'leaves' else [()]
		for i, child in enumerate(self.children):
			if isinstance(child, Tree):
				result.extend((i, ) + pos
						for pos in child.treepositions(order))
			else:
				result.append((i, ))
		return result

	def copy(self, deep=False):
		"""Create a copy of this tree; with ``deep``, copy all nodes.

		The ``prob`` attribute is copied; parent references are not."""
		if deep:
			children = [child.copy(deep=True) if isinstance(child, Tree)
					else child for child in self.children]
		else:
			children = self.children
		tree = self.__class__(self.label, children)
		tree.prob = self.prob
		return tree

	@classmethod
	def parse(cls, s):
		"""Parse a tree in bracket notation, such as
		``(S (NP (NNP John)) (VP (V runs)))``.

		A node may have an empty label, as in the Penn treebank convention
		``( (S ...) )``; labels and words are sequences of characters other
		than whitespace and brackets.

		:raises ValueError: for unbalanced brackets, a word outside of a
			node, or more than one tree."""
		stack = [(None, [])]  # (label, children) of open nodes
		for match in TOKENRE.finditer(s):
			token = match.group()
			if token[0] == '(':
				if len(stack) == 1 and stack[0][1]:
					_parseerror(s, match, 'end-of-string')
				stack.append((match.group(1) or '', []))
			elif token == ')':
				if len(stack) == 1:
					_parseerror(s, match,
							'end-of-string' if stack[0][1] else '(')
				label, children = stack.pop()
				stack[-1][1].append(cls(label, children))
			else:
				if len(stack) == 1:
					_parseerror(s, match, '(')
				stack[-1][1].append(token)
		if len(stack) > 1:
			_parseerror(s, None, ')')
		elif not stack[0][1]:
			_parseerror(s, None, '(')
		return stack[0][1][0]

	def __repr__(self):
		return '%s(%r, [%s])' % (self.__class__.__name__, self.label,
				', '.join(repr(child) for child in self.children))

	def __str__(self):
		return '(%s %s)' % (self.label, ' '.join(
				str(child) for child in self.children))


def _parseerror(s, match, expecting):
	"""Raise a ValueError pointing at the token where parsing failed.

	:param match: regexp match of the offending token; None for the end of
		the string."""
	if match is None:
		pos, token = len(s), 'end-of-string'
	else:
		pos, token = match.start(), match.group()
	context = s.replace('\n', ' ').replace('\t', ' ')
	offset = pos
	if len(context) > pos + 10:
		context = context[:pos + 10] + '...'
	if pos > 10:
		context = '...' + context[pos - 10:]
		offset = 13
	raise ValueError('Tree.parse(): expected %r but got %r at index %d.'
			'\n\t"%s"\n\t %s^' % (expecting, token, pos, context,
			' ' * offset))


__all__ = ['Tree']
