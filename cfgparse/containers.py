"""Data types for chart items and chart cells of the CYK parser."""
from .tree import Tree


class ParseNode(object):
	"""A candidate derivation in the chart: a label and one or two children.

	The child of a node built from a terminal rule is the word; other
	children are ParseNodes from smaller spans. Candidates are shared by all
	the candidates of larger spans that are built from them, so the chart is
	a packed forest; ``totree()`` unpacks a candidate into a tree."""
	__slots__ = ('label', 'left', 'right')

	def __init__(self, label, left, right=None):
		self.label = label
		self.left = left
		self.right = right

	def children(self):
		return (self.left, ) if self.right is None else (self.left, self.right)

	def totree(self):
		"""Return a new Tree for the derivation rooted at this node.

		>>> node = ParseNode('S', ParseNode('NP', 'Mary'), ParseNode('VP', 'walks'))
		>>> print(node.totree())
		(S (NP Mary) (VP walks))"""
		return Tree(self.label, [child.totree()
				if isinstance(child, ParseNode) else child
				for child in self.children()])

	def __repr__(self):
		return '%s(%r, %r, %r)' % (self.__class__.__name__,
				self.label, self.left, self.right)


class ProbabilisticParseNode(ParseNode):
	"""A candidate derivation with the log probability of its subtree."""
	__slots__ = ('logprob', )

	def __init__(self, label, logprob, left, right=None):
		super(ProbabilisticParseNode, self).__init__(label, left, right)
		self.logprob = logprob

	def totree(self):
		tree = super(ProbabilisticParseNode, self).totree()
		tree.prob = self.logprob
		return tree

	def __repr__(self):
		return '%s(%r, %g, %r, %r)' % (self.__class__.__name__,
				self.label, self.logprob, self.left, self.right)


class PartialParseList(object):
	"""The candidates for one span of the sentence.

	``add()`` keeps every candidate; ``update()`` keeps only the most
	probable candidate for each label.

	>>> cell = PartialParseList()
	>>> cell.update(ProbabilisticParseNode('NP', -2.0, 'dog'))
	True
	>>> cell.update(ProbabilisticParseNode('NP', -0.5, 'dog'))
	True
	>>> cell.update(ProbabilisticParseNode('NP', -1.0, 'dog'))
	False
	>>> len(cell), cell['NP'].logprob
	(1, -0.5)"""
	__slots__ = ('nodes', 'index')

	def __init__(self):
		self.nodes = []
		self.index = {}  # label => first candidate with that label

	def add(self, node):
		"""Add a candidate."""
		self.index.setdefault(node.label, node)
		self.nodes.append(node)

	def update(self, node):
		"""Add a candidate unless there is a better one with the same label.
		A worse one is removed, and the new candidate goes to the end, so
		that it is combined after the candidates that were added before it.

		:returns: True if the candidate was added."""
		old = self.index.get(node.label)
		if old is None:
			self.add(node)
			return True
		elif node.logprob > old.logprob:
			self.nodes.remove(old)
			self.nodes.append(node)
			self.index[node.label] = node
			return True
		return False

	def withlabel(self, label):
		"""Return the candidates with the given label."""
		return [node for node in self.nodes if node.label == label]

	def __getitem__(self, label):
		return self.index[label]

	def __contains__(self, label):
		return label in self.index

	def __iter__(self):
		return iter(self.nodes)

	def __len__(self):
		return len(self.nodes)

	def __repr__(self):
		return '%s(%r)' % (self.__class__.__name__, self.nodes)


def newchart(n):
	"""Return an upper triangular chart for a sentence of length n.

	``chart[i][j]`` holds the candidates for the words ``i`` through ``j``
	(inclusive); cells with ``j < i`` are None.

	>>> chart = newchart(3)
	>>> len(chart), chart[1][0] is None, len(chart[0][2])
	(3, True, 0)"""
	return [[PartialParseList() if i <= j else None for j in range(n)]
			for i in range(n)]


__all__ = ['ParseNode', 'ProbabilisticParseNode', 'PartialParseList',
		'newchart']
