#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Apr 10 08:49:35 2024

@author: Mike
"""


import unittest
from pytest import approx

from opticbench.analysis.analyzers import EnergyAnalyzer
from opticbench.analysis.config import EnergyConfig
from opticbench.error import DataError
from opticbench.light.lightdata import EnergyData, GhostFocusData
from opticbench.light.spectrum import (create_he_ne_spec, merge_spectra,
                                       create_nd_glass_spec,
                                       create_short_pass_filter)
from opticbench.nodes.detectors import EnergyMeter, Spectrometer
from opticbench.nodes.elements import Lens, IdealFilter, ThinMirror
from opticbench.nodes.group import NodeGroup
from opticbench.nodes.node import NodeState
from opticbench.nodes.source import Source, round_collimated_ray_source
from opticbench.util.units import millimeter, nanometer


class EnergyFlowTestCase(unittest.TestCase):
    def setUp(self):
        self.g = NodeGroup('bench')
        self.src = Source('src', EnergyData(create_he_ne_spec(1.0)))
        self.lens = Lens('lens')
        self.filter = IdealFilter('filter', 0.5)
        self.meter = EnergyMeter('meter')
        for n in (self.meter, self.filter, self.lens, self.src):
            self.g.add_node(n)
        self.g.connect(self.src, 'output_1', self.lens, 'input_1')
        self.g.connect(self.lens, 'output_1', self.filter, 'input_1')
        self.g.connect(self.filter, 'output_1', self.meter, 'input_1')

    def test_chain(self):
        assert self.g.execution_order() == [self.src, self.lens, self.filter,
                                             self.meter]
        EnergyAnalyzer().analyze(self.g)
        assert self.meter.report()['energy'] == approx(0.5)
        for n in self.g.nodes.values():
            assert n.state is NodeState.RESOLVED

    def test_repeated_analysis(self):
        EnergyAnalyzer().analyze(self.g)
        EnergyAnalyzer().analyze(self.g)
        assert self.meter.report()['energy'] == approx(0.5)

    def test_unconnected_detector(self):
        lonely = Spectrometer('lonely')
        self.g.add_node(lonely)
        with self.assertLogs('opticbench', level='WARNING') as cm:
            EnergyAnalyzer().analyze(self.g)
        assert any('lonely' in line for line in cm.output)
        assert lonely.report() == {'spectrum': None, 'total_energy': 0.0}

    def test_spectral_filter(self):
        two_lines = merge_spectra(create_he_ne_spec(1.0),
                                  create_nd_glass_spec(3.0))
        self.src.light_data = EnergyData(two_lines)
        sp = create_short_pass_filter((nanometer(400.), nanometer(1200.)),
                                      nanometer(1.), nanometer(800.))
        self.filter.set_property('transmission', sp)
        spectro = Spectrometer('spectro')
        self.g.add_node(spectro)
        self.g.connect(self.meter, 'output_1', spectro, 'input_1')
        EnergyAnalyzer().analyze(self.g)
        assert self.meter.report()['energy'] == approx(1.0)
        report = spectro.report()
        assert report['total_energy'] == approx(1.0)
        assert report['spectrum'].center_wavelength() == \
            approx(nanometer(632.816), rel=1e-4)

    def test_mirror_is_lossless(self):
        mirror = ThinMirror('mirror')
        self.g.add_node(mirror)
        self.g.disconnect(self.meter, 'input_1')
        self.g.connect(self.filter, 'output_1', mirror, 'input_1')
        self.g.connect(mirror, 'output_1', self.meter, 'input_1')
        EnergyAnalyzer().analyze(self.g)
        assert self.meter.report()['energy'] == approx(0.5)

    def test_ray_source(self):
        src = round_collimated_ray_source(millimeter(1.), 2.0, 3)
        self.g.remove_node(self.src)
        self.g.add_node(src)
        self.g.connect(src, 'output_1', self.lens, 'input_1')
        EnergyAnalyzer(EnergyConfig(nanometer(0.5))).analyze(self.g)
        assert self.meter.report()['energy'] == approx(1.0)

    def test_wrong_light_data(self):
        self.src.light_data = GhostFocusData([])
        with self.assertRaises(DataError) as cm:
            EnergyAnalyzer().analyze(self.g)
        assert cm.exception.node_id == self.src.uuid
        assert cm.exception.node_name == 'src'


class NestedGroupTestCase(unittest.TestCase):
    def setUp(self):
        self.top = NodeGroup('top')
        self.sub = NodeGroup('sub')
        self.filter = IdealFilter('filter', 0.25)
        self.sub.add_node(self.filter)
        self.sub.map_input_port(self.filter, 'input_1', 'in')
        self.sub.map_output_port(self.filter, 'output_1', 'out')
        self.src = Source('src', EnergyData(create_he_ne_spec(1.0)))
        self.meter = EnergyMeter('meter')
        for n in (self.src, self.sub, self.meter):
            self.top.add_node(n)

    def test_subgroup(self):
        self.top.connect(self.src, 'output_1', self.sub, 'in')
        self.top.connect(self.sub, 'out', self.meter, 'input_1')
        EnergyAnalyzer().analyze(self.top)
        assert self.meter.report()['energy'] == approx(0.25)
        assert self.filter.state is NodeState.RESOLVED

    def test_inverted_subgroup(self):
        self.sub.inverted = True
        self.top.connect(self.src, 'output_1', self.sub, 'out')
        self.top.connect(self.sub, 'in', self.meter, 'input_1')
        EnergyAnalyzer().analyze(self.top)
        assert self.meter.report()['energy'] == approx(0.25)

    def test_group_outputs(self):
        self.top.connect(self.src, 'output_1', self.sub, 'in')
        self.top.connect(self.sub, 'out', self.meter, 'input_1')
        self.top.map_output_port(self.meter, 'output_1', 'exit')
        result = EnergyAnalyzer().analyze(self.top)
        assert list(result) == ['exit']
        assert result['exit'].total_energy() == approx(0.25)

    def test_expand_view(self):
        self.top.connect(self.src, 'output_1', self.sub, 'in')
        self.top.connect(self.sub, 'out', self.meter, 'input_1')
        assert not self.sub.expanded
        EnergyAnalyzer().analyze(self.top)
        collapsed = self.meter.report()['energy']
        self.sub.expand_view()
        assert self.sub.expanded
        EnergyAnalyzer().analyze(self.top)
        assert self.meter.report()['energy'] == approx(collapsed)
        assert collapsed == approx(0.25)
        self.sub.expand_view(False)
        assert not self.sub.expanded


if __name__ == '__main__':
    unittest.main(verbosity=2)
