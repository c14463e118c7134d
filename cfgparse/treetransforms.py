"""Post-processing of parse trees produced from a CNF grammar."""
from .tree import Tree


def correctparents(tree):
	"""Set the parent back-reference of every node in the tree.

	The root gets parent None. Modifies tree in-place; children are owned by
	exactly one parent, so each node is visited once, top-down.

	>>> tree = Tree('(S (NP Mary) (VP walks))')
	>>> _ = correctparents(tree)
	>>> tree[1].parent is tree, tree.parent is None
	(True, True)"""
	tree._parent = None
	agenda = [tree]
	while agenda:
		node = agenda.pop()
		for child in node:
			if isinstance(child, Tree):
				child._parent = node
				agenda.append(child)
	return tree


def removehelpernodes(tree, helpers):
	"""Splice out the nodes introduced by binarizing long right-hand sides.

	The children of a helper node take its place in the parent node; this is
	applied recursively, so that chains of helper nodes disappear. Modifies
	tree in-place; parent back-references are updated for spliced children.

	:param helpers: the labels of helper nodes; see ``Grammar.helpers``.
		Other nodes are kept, even when their label looks like a helper.

	>>> tree = Tree('(VP (X1 (X0 (V gave) (NP Mary)) (NP flowers)) (PP today))')
	>>> print(removehelpernodes(tree, {'X0', 'X1'}))
	(VP (V gave) (NP Mary) (NP flowers) (PP today))"""
	agenda = [tree]
	while agenda:
		node = agenda.pop()
		n = 0
		while n < len(node):
			child = node[n]
			if isinstance(child, Tree) and child.label in helpers:
				# re-examine position n, which now holds the first grandchild
				node[n:n + 1] = child.children
				for grandchild in child:
					if isinstance(grandchild, Tree):
						grandchild._parent = node
				child.children = []
			else:
				if isinstance(child, Tree):
					agenda.append(child)
				n += 1
	return tree


__all__ = ['correctparents', 'removehelpernodes']
