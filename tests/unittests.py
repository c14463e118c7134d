"""Unit tests for cfgparse modules."""
# pylint: disable=C0111,W0232
import io
import sys
from math import exp, log
import pytest
from cfgparse import cli
from cfgparse.tree import Tree
from cfgparse.rule import (Rule, ProbabilisticRule, TERMINAL,
		SINGLE_NON_TERMINAL, TWO_NON_TERMINAL, MULTIPLE_NON_TERMINAL,
		rulekey, rightrulekey, classify, trimsymbol)
from cfgparse.grammar import (Grammar, ProbabilisticGrammar, UniqueIDs,
		readlexicon, writegrammar, torule)
from cfgparse.containers import (ParseNode, ProbabilisticParseNode,
		PartialParseList)
from cfgparse.cyk import parse, viterbiparse
from cfgparse.lexicon import (NUM, RARE, replaceexceptionalwords,
		reinsertexceptionalwords)
from cfgparse.treebank import brackettrees, readbrackettrees
from cfgparse.parser import Parser, readparam, doparsing
from cfgparse.util import openread, openwrite

TREEBANK = '''\
(S (NP (NNP John)) (VP (VBD saw) (NP (CD 3) (NNS dogs))))
( (S (NP-SBJ (NNP Mary))
	(VP (VBD saw) (NP (CD 12) (NNS cats)))) )
(S (NP (NNP John)) (VP (VBD saw) (NP (NNP Mary))))
'''

ATTACHMENT = '''\
S -> NP VP [1]
VP -> V NP [0.6]
VP -> VP PP [0.4]
NP -> NP PP [0.2]
NP -> John [0.4]
NP -> Mary [0.4]
PP -> P NP [1]
V -> saw [1]
P -> with [1]'''


def makegrammar(lines, cls=Grammar, **kwds):
	return cls([cls.ruleclass.parse(line) for line in lines.splitlines()],
			**kwds)


def checkindices(grammar):
	"""Both indices are sorted and contain the same rules."""
	assert grammar.rules == sorted(grammar.rules, key=rulekey)
	assert grammar.rulesrightsorted == sorted(
			grammar.rulesrightsorted, key=rightrulekey)
	assert (sorted(id(a) for a in grammar.rules)
			== sorted(id(a) for a in grammar.rulesrightsorted))


class Test_rule(object):
	def test_parse(self):
		rule = Rule.parse('VP -> V NP PP')
		assert rule.lhs == 'VP'
		assert rule.rhs == ['V', 'NP', 'PP']
		assert Rule.parse('NP -> DT NN [0.5]').rhs == ['DT', 'NN']
		rule = ProbabilisticRule.parse('NP -> DT NN [0.5]')
		assert rule.prob == 0.5
		assert str(rule) == 'NP -> DT NN [0.5]'

	def test_malformed(self):
		for line in ('NP DT NN', 'NP ->', ' -> DT', 'NP VP -> DT'):
			with pytest.raises(ValueError):
				Rule.parse(line)
		for line in ('NP -> DT NN', 'NP -> DT [1.5]', 'NP -> DT [abc]'):
			with pytest.raises(ValueError):
				ProbabilisticRule.parse(line)
		with pytest.raises(ValueError):
			Rule('NP', [])

	def test_classify(self):
		nonterminals = {'S', 'NP', 'VP'}
		assert classify(Rule('S', ['NP', 'VP']), nonterminals) == (
				TWO_NON_TERMINAL)
		assert classify(Rule('S', ['NP', 'VP', 'PP']), nonterminals) == (
				MULTIPLE_NON_TERMINAL)
		assert classify(Rule('S', ['VP']), nonterminals) == (
				SINGLE_NON_TERMINAL)
		assert classify(Rule('NP', ['Fido']), nonterminals) == TERMINAL
		# unknown symbol and punctuation
		assert classify(Rule('NP', ['ADJP']), nonterminals) == TERMINAL
		assert classify(Rule('NP', [',']), nonterminals) == TERMINAL

	def test_leftrecursive(self):
		assert Rule('NP', ['NP'], SINGLE_NON_TERMINAL).leftrecursive()
		assert not Rule('NP', ['N'], SINGLE_NON_TERMINAL).leftrecursive()
		assert not Rule('NP', ['NP', 'PP'], TWO_NON_TERMINAL).leftrecursive()

	def test_replacepair(self):
		rule = Rule('A', 'B C B C D'.split(), MULTIPLE_NON_TERMINAL)
		assert rule.replacepair('B', 'C', 'X0')
		assert rule.rhs == ['X0', 'B', 'C', 'D']
		assert rule.type == MULTIPLE_NON_TERMINAL
		assert not rule.replacepair('C', 'B', 'X1')

	def test_trimsymbol(self):
		assert trimsymbol('NP-SBJ-1') == 'NP'
		assert trimsymbol('NP=2') == 'NP'
		assert trimsymbol('-NONE-') == '-NONE-'
		assert trimsymbol('S') == 'S'


class Test_grammar(object):
	def test_indices(self):
		grammar = makegrammar('S -> NP VP\nNP -> dog\nN -> dog\n'
				'NP -> Det N\nVP -> barks\nDet -> the')
		checkindices(grammar)
		assert len(grammar) == 6
		assert not grammar.addrule(Rule('NP', ['dog']))
		assert len(grammar) == 6
		assert grammar.addrule(Rule('VP', ['V', 'NP'], TWO_NON_TERMINAL))
		assert grammar.addrule(Rule('NP', ['cat'], TERMINAL))
		checkindices(grammar)
		assert len(grammar) == 8
		assert grammar.removerule(Rule('NP', ['dog']))
		assert not grammar.removerule(Rule('NP', ['dog']))
		checkindices(grammar)
		assert [str(a) for a in grammar.terminalruleswithrightside('dog')
				] == ['N -> dog']
		assert grammar.removerule(Rule('S', ['NP', 'VP']))
		checkindices(grammar)
		assert len(grammar) == 6

	def test_queries(self):
		grammar = makegrammar('S -> NP VP\nNP -> dog\nN -> dog\n'
				'NP -> Det N\nVP -> barks\nDet -> the')
		assert [str(a) for a in grammar.ruleswithleftside('NP')] == [
				'NP -> Det N', 'NP -> dog']
		assert grammar.ruleswithleftside('PP') == []
		assert [str(a) for a in grammar.terminalruleswithrightside('dog')
				] == ['N -> dog', 'NP -> dog']
		assert grammar.terminalruleswithrightside('cat') == []
		assert [str(a) for a in grammar.ruleswithtwononterminalsonrightside(
				'NP', 'VP')] == ['S -> NP VP']
		assert grammar.ruleswithtwononterminalsonrightside('VP', 'NP') == []
		assert grammar.partofspeechtags() == ['Det', 'N', 'NP', 'VP']
		assert grammar.leftsides() == ['Det', 'N', 'NP', 'S', 'VP']
		assert str(grammar.searchrule(Rule('NP', ['Det', 'N']))) == (
				'NP -> Det N')
		assert grammar.searchrule(Rule('NP', ['N', 'Det'])) is None

	def test_duplicates(self):
		grammar = makegrammar('NP -> dog\nNP -> dog\nS -> NP VP')
		assert len(grammar) == 2
		checkindices(grammar)

	def test_updatetypes(self):
		grammar = makegrammar('S -> VP\nVP -> V\nV -> walks\nS -> NP VP PP')
		before = [(str(a), a.type) for a in grammar]
		grammar.updatetypes()
		assert [(str(a), a.type) for a in grammar] == before
		assert grammar.searchrule(Rule('VP', ['V'])).type == (
				SINGLE_NON_TERMINAL)
		assert grammar.searchrule(Rule('V', ['walks'])).type == TERMINAL

	def test_fromtreebank(self):
		trees = list(brackettrees(TREEBANK.splitlines()))
		grammar = Grammar.fromtreebank(trees, mincount=2)
		assert trees[0].leaves() == ['John', 'saw', '3', 'dogs']
		assert grammar.lexicon['saw'] == 3
		assert grammar.searchrule(Rule('NNS', [RARE])) is not None
		assert grammar.searchrule(Rule('CD', [NUM])) is not None
		assert grammar.searchrule(Rule('NNS', ['dogs'])) is None
		assert grammar.searchrule(Rule('NP', ['NNP'])).type == (
				SINGLE_NON_TERMINAL)
		checkindices(grammar)

	def test_torule(self):
		assert str(torule(Tree('(S (NP-SBJ John) (VP walks))'))) == (
				'S -> NP VP')
		assert str(torule(Tree('(S (NP-SBJ John) (VP walks))'),
				trim=False)) == 'S -> NP-SBJ VP'
		assert torule(Tree('S', [Tree('', ['John'])])) is None

	def test_readlexicon(self):
		assert readlexicon(['dog 3', '', 'cat 1']) == {'dog': 3, 'cat': 1}
		with pytest.raises(ValueError):
			readlexicon(['dog'])
		with pytest.raises(ValueError):
			readlexicon(['dog three'])

	def test_uniqueids(self):
		ids = UniqueIDs('X')
		assert [next(ids) for _ in range(3)] == ['X0', 'X1', 'X2']


class Test_cnf(object):
	def test_binarize(self):
		grammar = makegrammar('S -> NP VP\nVP -> V NP PP\nVP -> V\n'
				'NP -> John\nNP -> Mary\nV -> sleeps\nV -> saw\n'
				'PP -> P NP\nP -> with').tocnf()
		checkindices(grammar)
		assert all(a.type in (TERMINAL, TWO_NON_TERMINAL) for a in grammar)
		assert str(grammar.searchrule(Rule('X0', ['V', 'NP']))) == (
				'X0 -> V NP')
		assert grammar.searchrule(Rule('VP', ['X0', 'PP'])) is not None
		assert grammar.searchrule(Rule('VP', ['saw'])).type == TERMINAL
		assert grammar.searchrule(Rule('VP', ['V'])) is None
		trees = parse('John saw Mary with John'.split(), grammar)
		assert [str(a) for a in trees] == ['(S (NP John) (VP (V saw) '
				'(NP Mary) (PP (P with) (NP John))))']
		assert [str(a) for a in parse(['John', 'sleeps'], grammar)] == [
				'(S (NP John) (VP sleeps))']

	def test_unitcycle(self):
		grammar = makegrammar(
				'S -> A\nA -> B\nB -> A\nA -> a\nB -> b').tocnf()
		checkindices(grammar)
		assert [str(a) for a in grammar] == ['A -> a', 'A -> b', 'B -> a',
				'B -> b', 'S -> a', 'S -> b']
		assert [str(a) for a in parse(['b'], grammar)] == ['(S b)']

	def test_leftrecursive(self):
		grammar = makegrammar('S -> S\nS -> NP VP\nNP -> John\n'
				'VP -> walks').tocnf()
		assert grammar.searchrule(Rule('S', ['S'])) is not None
		assert len(parse(['John', 'walks'], grammar)) == 1

	def test_freshsymbols(self):
		grammar = makegrammar('S -> X0 B C\nX0 -> x\nB -> b\nC -> c')
		grammar.tocnf()
		assert str(grammar.searchrule(Rule('S', ['X1', 'C']))) == 'S -> X1 C'
		assert str(grammar.searchrule(Rule('X1', ['X0', 'B']))) == (
				'X1 -> X0 B')
		grammar.addrule(Rule('S', ['C', 'B', 'C'], MULTIPLE_NON_TERMINAL))
		grammar.tocnf()
		assert str(grammar.searchrule(Rule('S', ['X2', 'C']))) == 'S -> X2 C'

	def test_helpernodes(self):
		grammar = makegrammar('S -> X0 B C\nX0 -> x\nB -> b\nC -> c').tocnf()
		assert grammar.helpers == {'X1'}
		assert [str(a) for a in parse(['x', 'b', 'c'], grammar)] == [
				'(S (X0 x) (B b) (C c))']

	def test_sharedpair(self):
		grammar = makegrammar('S -> A B C\nT -> D A B\nA -> a\nB -> b\n'
				'C -> c\nD -> d').tocnf()
		assert [str(a) for a in grammar.ruleswithleftside('T')] == [
				'T -> D X0']
		assert [str(a) for a in grammar.ruleswithleftside('X0')] == [
				'X0 -> A B']

	def test_probabilities(self):
		grammar = makegrammar('S -> NP VP [1]\nVP -> V [0.4]\n'
				'VP -> V NP [0.6]\nV -> walks [0.5]\nV -> sees [0.5]\n'
				'NP -> Mary [1]', ProbabilisticGrammar,
				lexicon={'Mary': 1, 'walks': 1, 'sees': 1})
		assert grammar.checkprobabilities() == {}
		tree = Tree('(S (NP Mary) (VP (V walks)))')
		before = grammar.logprob(tree)
		assert before == pytest.approx(log(0.2))
		grammar.tocnf()
		assert grammar.searchrule(
				ProbabilisticRule('VP', ['walks'])).prob == pytest.approx(0.2)
		result, = viterbiparse(['Mary', 'walks'], grammar)
		assert str(result) == '(S (NP Mary) (VP walks))'
		assert result.prob == pytest.approx(before)

	def test_helperprobability(self):
		grammar = makegrammar('S -> A B C [1]\nA -> a [1]\nB -> b [1]\n'
				'C -> c [1]', ProbabilisticGrammar).tocnf()
		assert grammar.searchrule(ProbabilisticRule('X0', ['A', 'B'])).prob == (
				1.0)
		result, = viterbiparse(['a', 'b', 'c'], grammar)
		assert str(result) == '(S (A a) (B b) (C c))'
		assert result.prob == 0.0


class Test_cyk(object):
	def test_parse(self):
		grammar = makegrammar('NP -> dog\nVP -> barks\nS -> NP VP\n'
				'Det -> the\nNP -> Det N\nN -> dog')
		trees = parse(['the', 'dog', 'barks'], grammar)
		assert [str(a) for a in trees] == [
				'(S (NP (Det the) (N dog)) (VP barks))']
		tree = trees[0]
		assert tree.parent is None
		assert tree[1].parent is tree
		assert tree[0][1].parent is tree[0]
		assert parse(['barks', 'the', 'dog'], grammar) == []
		assert parse([], grammar) == []
		assert parse(['the', 'cat', 'barks'], grammar) == []

	def test_ambiguity(self):
		grammar = makegrammar(ATTACHMENT)
		trees = parse('John saw Mary with John'.split(), grammar)
		assert sorted(str(a) for a in trees) == [
				'(S (NP John) (VP (V saw) (NP (NP Mary) (PP (P with) '
				'(NP John)))))',
				'(S (NP John) (VP (VP (V saw) (NP Mary)) (PP (P with) '
				'(NP John))))']

	def test_viterbi(self):
		grammar = makegrammar(ATTACHMENT, ProbabilisticGrammar)
		assert grammar.checkprobabilities() == {}
		trees = viterbiparse('John saw Mary with John'.split(), grammar)
		assert [str(a) for a in trees] == [
				'(S (NP John) (VP (VP (V saw) (NP Mary)) (PP (P with) '
				'(NP John))))']
		assert exp(trees[0].prob) == pytest.approx(
				0.4 * 0.4 * 0.6 * 0.4 * 0.4)
		assert viterbiparse(['saw'], grammar) == []

		grammar = makegrammar('S -> NP VP [1]\nNP -> Mary [1]\n'
				'VP -> walks [0]\nVP -> talks [1]', ProbabilisticGrammar)
		assert viterbiparse(['Mary', 'walks'], grammar) == []
		result, = viterbiparse(['Mary', 'talks'], grammar)
		assert str(result) == '(S (NP Mary) (VP talks))'
		assert result.prob == 0.0

	def test_partialparselist(self):
		cell = PartialParseList()
		cell.add(ParseNode('NP', 'dog'))
		cell.add(ParseNode('NP', 'dog'))
		cell.add(ParseNode('N', 'dog'))
		assert len(cell) == 3
		assert len(cell.withlabel('NP')) == 2
		assert 'N' in cell and 'VP' not in cell

		cell = PartialParseList()
		cell.update(ProbabilisticParseNode('NP', -2.0, 'dog'))
		cell.update(ProbabilisticParseNode('N', -1.0, 'dog'))
		assert cell.update(ProbabilisticParseNode('NP', -0.5, 'dog'))
		assert [a.label for a in cell] == ['N', 'NP']
		assert cell['NP'].logprob == -0.5


class Test_lexicon(object):
	def test_roundtrip(self):
		trees = list(brackettrees(TREEBANK.splitlines()))
		grammar = ProbabilisticGrammar.fromtreebank(trees, mincount=2).tocnf()
		parser = Parser(grammar)
		result, = parser.parse('Mary saw 7 elephants'.split())
		assert str(result) == (
				'(S (NP Mary) (VP (VBD saw) (NP (CD 7) (NNS elephants))))')

	def test_replace(self):
		sent = ['John', 'saw', '3.5', 'gnus', '.']
		assert replaceexceptionalwords(sent, {'John': 2, 'saw': 2, '.': 5},
				2) == ['John', 'saw', NUM, RARE, '.']
		with pytest.raises(ValueError):
			reinsertexceptionalwords(Tree('(S (NP _rare_))'), ['a', 'b'])


class Test_treebank(object):
	def test_brackettrees(self):
		trees = list(brackettrees(TREEBANK.splitlines()))
		assert len(trees) == 3
		assert str(trees[1]) == ('(S (NP-SBJ (NNP Mary)) (VP (VBD saw) '
				'(NP (CD 12) (NNS cats))))')

	def test_malformed(self):
		with pytest.raises(ValueError):
			list(brackettrees(['(S (NP John)']))
		with pytest.raises(ValueError):
			list(brackettrees(['(S (NP John)))']))

	def test_readbrackettrees(self, tmp_path):
		filename = tmp_path / 'train.mrg'
		filename.write_text(TREEBANK, encoding='utf8')
		assert len(readbrackettrees(str(filename))) == 3


def test_tree():
	tree = Tree('(S (NP (Det the) (N dog)) (VP barks))')
	assert tree.leaves() == ['the', 'dog', 'barks']
	assert tree[0, 1] == Tree('N', ['dog'])
	assert tree.copy(deep=True) == tree
	assert tree.copy(deep=True)[0] is not tree[0]
	with pytest.raises(ValueError):
		Tree('(S (NP John)')


def test_grammarfiles(tmp_path):
	trees = list(brackettrees(TREEBANK.splitlines()))
	grammar = ProbabilisticGrammar.fromtreebank(trees, mincount=2)
	assert grammar.checkprobabilities() == {}
	rules, lexicon = writegrammar(grammar)
	rulefile, lexiconfile = tmp_path / 'g.rules', tmp_path / 'g.lex.gz'
	with openwrite(str(rulefile)) as out:
		out.write(rules)
	with openwrite(str(lexiconfile)) as out:
		out.write(lexicon)
	with openread(str(lexiconfile)) as inp:
		assert inp.read() == lexicon
	grammar1 = ProbabilisticGrammar.fromfiles(
			str(rulefile), str(lexiconfile), mincount=2)
	assert str(grammar1) == str(grammar)
	assert grammar1.lexicon == grammar.lexicon
	checkindices(grammar1)


def test_parser(tmp_path):
	paramfile = tmp_path / 'test.prm'
	paramfile.write_text("start='TOP', prob=True", encoding='utf8')
	prm = readparam(str(paramfile))
	assert prm.start == 'TOP' and prm.prob and prm.mincount == 1
	paramfile.write_text('beamwidth=3', encoding='utf8')
	with pytest.raises(ValueError):
		readparam(str(paramfile))

	trees = list(brackettrees(TREEBANK.splitlines()))
	grammar = Grammar.fromtreebank(trees).tocnf()
	out = io.StringIO()
	unparsed = doparsing(Parser(grammar), ['John saw Mary\n', '\n',
			'Mary Mary\n'], out)
	assert unparsed == 1
	assert out.getvalue() == '(S (NP John) (VP (VBD saw) (NP Mary)))\n\n'


def test_cli(tmp_path, monkeypatch):
	treebank = tmp_path / 'train.mrg'
	treebank.write_text(TREEBANK, encoding='utf8')
	rules, lexicon = tmp_path / 'g.rules', tmp_path / 'g.lex'
	monkeypatch.setattr(sys, 'argv', ['cfgparse', 'grammar', '--prob',
			'--mincount=2', str(treebank), str(rules), str(lexicon)])
	cli.main()
	assert 'S -> NP VP [1]' in rules.read_text(encoding='utf8').splitlines()
	assert 'saw 3' in lexicon.read_text(encoding='utf8').splitlines()

	sents, parses = tmp_path / 'sents.txt', tmp_path / 'parses.txt'
	sents.write_text('Mary saw 7 elephants\n', encoding='utf8')
	monkeypatch.setattr(sys, 'argv', ['cfgparse', 'parser', '--prob',
			'--mincount=2', str(rules), str(lexicon), str(sents),
			str(parses)])
	cli.main()
	prob, tree = parses.read_text(encoding='utf8').splitlines()
	assert tree == '(S (NP Mary) (VP (VBD saw) (NP (CD 7) (NNS elephants))))'
	assert prob.startswith('prob=')
	assert float(prob[len('prob='):]) == pytest.approx(1 / 9)
