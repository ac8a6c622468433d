# ========================
# tests/test_filtering.py
# ========================

import unittest
import random
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ev_insights.pipeline.filtering import FilterSpec, filter_vehicles, passes_filters
from ev_insights.pipeline.options import get_filter_options
from ev_insights.pipeline.records import VehicleRecord, VehicleType


def make_vehicle(**overrides):
    fields = dict(
        vin='VIN0000001', county='King', city='Seattle', state='WA', postal_code='98101',
        model_year=2022, make='TESLA', model='MODEL 3', vehicle_type=VehicleType.BEV,
        electric_range=250,
    )
    fields.update(overrides)
    return VehicleRecord(**fields)


def random_fleet(seed, size=300):
    rnd = random.Random(seed)
    return [
        make_vehicle(
            vin=f'V{i:05d}',
            model_year=rnd.randint(2012, 2024),
            make=rnd.choice(['TESLA', 'NISSAN', 'KIA', 'FORD']),
            vehicle_type=rnd.choice(list(VehicleType)),
            state=rnd.choice(['WA', 'CA', 'OR', '']),
        )
        for i in range(size)
    ]


class TestFilterEngine(unittest.TestCase):

    def setUp(self):
        self.fleet = random_fleet(seed=7)

    def _expected(self, spec):
        """Independent reading of the four predicates."""
        result = []
        for v in self.fleet:
            low, high = spec.year_range if spec.year_range else (float('-inf'), float('inf'))
            if not (low <= v.model_year <= high):
                continue
            if spec.manufacturers and v.make not in spec.manufacturers:
                continue
            if spec.vehicle_types and v.vehicle_type not in spec.vehicle_types:
                continue
            if spec.states and v.state not in spec.states:
                continue
            result.append(v)
        return result

    def test_filter_matches_predicate_definition(self):
        specs = [
            FilterSpec(),
            FilterSpec(year_range=(2015, 2020)),
            FilterSpec(year_range=(2012, 2024), manufacturers={'TESLA', 'KIA'}),
            FilterSpec(year_range=(2018, 2018), vehicle_types={VehicleType.PHEV}),
            FilterSpec(year_range=(2012, 2024), states={'WA'}),
            FilterSpec(year_range=(2016, 2023), manufacturers={'NISSAN'},
                       vehicle_types={VehicleType.BEV}, states={'CA', 'OR'}),
            FilterSpec(year_range=(2030, 2040)),
        ]
        for spec in specs:
            result = filter_vehicles(self.fleet, spec)
            self.assertEqual(result, self._expected(spec), f"Failed for spec: {spec}")
            for vehicle in result:
                self.assertTrue(passes_filters(vehicle, spec))

    def test_empty_sets_allow_all(self):
        spec = FilterSpec(year_range=(2012, 2024))
        self.assertEqual(filter_vehicles(self.fleet, spec), self.fleet)

    def test_year_bounds_are_inclusive(self):
        fleet = [make_vehicle(model_year=y) for y in (2019, 2020, 2021, 2022)]
        result = filter_vehicles(fleet, FilterSpec(year_range=(2020, 2021)))
        self.assertEqual([v.model_year for v in result], [2020, 2021])

    def test_inverted_range_matches_nothing(self):
        self.assertEqual(filter_vehicles(self.fleet, FilterSpec(year_range=(2024, 2012))), [])

    def test_blank_state_excluded_by_state_filter(self):
        fleet = [make_vehicle(state=''), make_vehicle(state='WA')]
        result = filter_vehicles(fleet, FilterSpec(states={'WA'}))
        self.assertEqual(len(result), 1)

    def test_input_is_not_mutated(self):
        snapshot = list(self.fleet)
        spec = FilterSpec(year_range=(2015, 2016), manufacturers=['TESLA'])
        filter_vehicles(self.fleet, spec)
        self.assertEqual(self.fleet, snapshot)
        self.assertEqual(spec.manufacturers, frozenset({'TESLA'}))

    def test_spec_normalisation_and_hashing(self):
        a = FilterSpec(year_range=[2015, 2020], manufacturers=['KIA'], vehicle_types=['bev'], states=['WA'])
        b = FilterSpec(year_range=(2015, 2020), manufacturers={'KIA'},
                       vehicle_types={VehicleType.BEV}, states=frozenset({'WA'}))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertEqual(a.to_dict(), {
            'year_range': [2015, 2020],
            'manufacturers': ['KIA'],
            'vehicle_types': ['BEV'],
            'states': ['WA'],
        })

    def test_unknown_vehicle_type_rejected(self):
        with self.assertRaises(ValueError):
            FilterSpec(vehicle_types=['DIESEL'])


class TestFilterOptions(unittest.TestCase):

    def test_options_from_records(self):
        fleet = [
            make_vehicle(model_year=2018, make='NISSAN', state='WA'),
            make_vehicle(model_year=2023, make='TESLA', state='CA'),
            make_vehicle(model_year=2011, make='NISSAN', state=''),
            make_vehicle(model_year=2020, make='BMW', state='WA'),
        ]

        options = get_filter_options(fleet)

        self.assertEqual(options['year_range'], (2011, 2023))
        self.assertEqual(options['manufacturers'], ['BMW', 'NISSAN', 'TESLA'])
        self.assertEqual(options['states'], ['CA', 'WA'])

    def test_options_from_empty_collection(self):
        options = get_filter_options([])
        self.assertEqual(options, {'year_range': (0, 0), 'manufacturers': [], 'states': []})

    def test_default_spec_from_options_keeps_everything(self):
        fleet = random_fleet(seed=3, size=100)
        spec = FilterSpec.from_options(get_filter_options(fleet))
        self.assertEqual(filter_vehicles(fleet, spec), fleet)


if __name__ == '__main__':
    unittest.main()
