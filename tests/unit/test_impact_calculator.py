import math
import random
import unittest

from impactsim.backend.impact_calculator import (
    DEFAULT_PHYSICS,
    PhysicsConstants,
    calculate_crater_depth,
    calculate_crater_diameter,
    calculate_energy,
    calculate_impact,
    calculate_mass,
    calculate_seismic_magnitude,
    calculate_shockwave_radius,
    calculate_thermal_radius,
    calculate_tsunami_height,
    estimate_affected_population,
    estimate_population_density,
    is_ocean_impact,
    ocean_basin,
)
from impactsim.backend.models import AsteroidParameters, InvalidInputError


def _no_draw():
    raise AssertionError("random source should not be consulted")


class TestMassAndEnergy(unittest.TestCase):
    def test_mass_matches_sphere_formula(self):
        expected = (4.0 / 3.0) * math.pi * 50.0**3 * 2000.0
        self.assertAlmostEqual(calculate_mass(100.0), expected, places=3)

    def test_mass_scales_with_cube_of_diameter(self):
        for diameter in (1.0, 37.5, 500.0, 10000.0):
            self.assertTrue(math.isclose(calculate_mass(2 * diameter), 8 * calculate_mass(diameter), rel_tol=1e-12))

    def test_mass_strictly_increasing(self):
        masses = [calculate_mass(d) for d in (1.0, 2.0, 10.0, 100.0, 1000.0)]
        self.assertEqual(masses, sorted(masses))
        self.assertEqual(len(set(masses)), len(masses))

    def test_density_override(self):
        dense = PhysicsConstants(asteroid_density_kg_m3=4000.0)
        self.assertTrue(math.isclose(calculate_mass(100.0, physics=dense), 2 * calculate_mass(100.0)))

    def test_energy_in_megatons(self):
        # 0.5 * 1000 kg * (1000 m/s)^2 = 5e8 J
        self.assertAlmostEqual(calculate_energy(1000.0, 1.0), 5e8 / 4.184e15, places=20)

    def test_energy_scales_with_velocity_squared(self):
        mass = calculate_mass(250.0)
        self.assertTrue(math.isclose(calculate_energy(mass, 40.0), 4 * calculate_energy(mass, 20.0), rel_tol=1e-12))

    def test_zero_mass_or_velocity_gives_zero_energy(self):
        self.assertEqual(calculate_energy(0.0, 20.0), 0.0)
        self.assertEqual(calculate_energy(1e9, 0.0), 0.0)

    def test_negative_inputs_rejected(self):
        with self.assertRaises(InvalidInputError):
            calculate_energy(-1.0, 20.0)
        with self.assertRaises(InvalidInputError):
            calculate_energy(1.0, -20.0)
        with self.assertRaises(InvalidInputError):
            calculate_mass(float("nan"))

    def test_mass_overflow_and_underflow_rejected(self):
        with self.assertRaises(InvalidInputError):
            calculate_mass(1e104)
        with self.assertRaises(InvalidInputError):
            calculate_mass(1e-120)
        self.assertEqual(calculate_mass(0.0), 0.0)


class TestCraterAndBlast(unittest.TestCase):
    def test_crater_floor_for_tiny_energy(self):
        self.assertEqual(calculate_crater_diameter(0.0, 45.0, False), 0.1)
        self.assertEqual(calculate_crater_diameter(1e-9, 10.0, True), 0.1)

    def test_crater_formula(self):
        expected = 0.8 * 1000.0**0.33 * math.sin(math.radians(45.0)) ** 0.3
        self.assertAlmostEqual(calculate_crater_diameter(1000.0, 45.0, False), expected, places=12)

    def test_steeper_impacts_make_larger_craters(self):
        shallow = calculate_crater_diameter(1000.0, 15.0, False)
        steep = calculate_crater_diameter(1000.0, 90.0, False)
        self.assertGreater(steep, shallow)
        self.assertAlmostEqual(steep, 0.8 * 1000.0**0.33, places=12)

    def test_ocean_terrain_factor(self):
        land = calculate_crater_diameter(1000.0, 60.0, False)
        ocean = calculate_crater_diameter(1000.0, 60.0, True)
        self.assertTrue(math.isclose(ocean, 0.7 * land))

    def test_crater_depth_is_quarter_of_diameter(self):
        for diameter in (0.1, 3.3, 120.0):
            self.assertEqual(calculate_crater_depth(diameter), diameter / 4)

    def test_shockwave_and_thermal_power_laws(self):
        self.assertAlmostEqual(calculate_shockwave_radius(1.0), 2.5)
        self.assertAlmostEqual(calculate_thermal_radius(1.0), 3.2)
        self.assertAlmostEqual(calculate_shockwave_radius(1000.0), 1000.0**0.33 * 2.5)
        self.assertAlmostEqual(calculate_thermal_radius(1000.0), 1000.0**0.41 * 3.2)
        # Thermal radius grows faster than the shockwave.
        self.assertGreater(
            calculate_thermal_radius(1e6) / calculate_thermal_radius(1.0),
            calculate_shockwave_radius(1e6) / calculate_shockwave_radius(1.0),
        )

    def test_seismic_magnitude_round_trips_joules(self):
        energy_mt = 1e20 / DEFAULT_PHYSICS.joules_per_megaton
        self.assertAlmostEqual(calculate_seismic_magnitude(energy_mt), (2.0 / 3.0) * 20 - 2.9, places=9)

    def test_seismic_magnitude_requires_positive_energy(self):
        with self.assertRaises(InvalidInputError):
            calculate_seismic_magnitude(0.0)

    def test_tsunami_height_uses_crater_term_for_small_craters(self):
        # min(1000 m / 10, 2000 m) * 16 ** 0.25 * 0.1
        self.assertAlmostEqual(calculate_tsunami_height(16.0, 1.0), 20.0)

    def test_tsunami_height_capped_by_water_depth(self):
        self.assertAlmostEqual(calculate_tsunami_height(16.0, 50.0), 400.0)
        self.assertAlmostEqual(calculate_tsunami_height(16.0, 50.0, water_depth=1000.0), 100.0)


class TestOceanClassification(unittest.TestCase):
    def test_boxes_are_deterministic(self):
        self.assertTrue(is_ocean_impact(0.0, -150.0, _no_draw))
        self.assertTrue(is_ocean_impact(10.0, 150.0, _no_draw))
        self.assertTrue(is_ocean_impact(0.0, -30.0, _no_draw))
        self.assertTrue(is_ocean_impact(-10.0, 80.0, _no_draw))

    def test_basin_names(self):
        self.assertEqual(ocean_basin(0.0, -150.0), "pacific")
        self.assertEqual(ocean_basin(0.0, -30.0), "atlantic")
        self.assertEqual(ocean_basin(-10.0, 80.0), "indian")
        self.assertIsNone(ocean_basin(50.0, 10.0))

    def test_americas_fall_inside_pacific_box(self):
        self.assertEqual(ocean_basin(40.7, -74.0), "pacific")

    def test_fallback_uses_ocean_coverage(self):
        self.assertTrue(is_ocean_impact(50.0, 10.0, lambda: 0.70))
        self.assertFalse(is_ocean_impact(50.0, 10.0, lambda: 0.71))
        self.assertFalse(is_ocean_impact(75.0, 0.0, lambda: 0.99))

    def test_coverage_override(self):
        dry = PhysicsConstants(ocean_coverage=0.0)
        self.assertFalse(is_ocean_impact(50.0, 10.0, lambda: 0.0, physics=dry))


class TestPopulation(unittest.TestCase):
    def test_density_bands(self):
        # Europe/Africa multiplier 1.2, variation 0.5 + 0.5
        self.assertAlmostEqual(estimate_population_density(0.0, 10.0, lambda: 0.5), 240.0)
        self.assertAlmostEqual(estimate_population_density(40.0, 10.0, lambda: 0.5), 180.0)
        self.assertAlmostEqual(estimate_population_density(60.0, 100.0, lambda: 0.5), 30.0)
        self.assertAlmostEqual(estimate_population_density(-20.0, -100.0, lambda: 0.5), 160.0)

    def test_variation_range(self):
        low = estimate_population_density(0.0, 10.0, lambda: 0.0)
        high = estimate_population_density(0.0, 10.0, lambda: 0.999999)
        self.assertAlmostEqual(low, 120.0)
        self.assertLess(high, 360.0)

    def test_density_floor(self):
        self.assertEqual(estimate_population_density(80.0, 160.0, lambda: 0.0), 1.0)

    def test_affected_population_uses_larger_radius(self):
        population = estimate_affected_population(0.0, 10.0, 1.0, 2.0, lambda: 0.5)
        self.assertEqual(population, round(240.0 * math.pi * 4.0))
        self.assertIsInstance(population, int)


class TestCalculateImpact(unittest.TestCase):
    def setUp(self):
        self.ocean_params = AsteroidParameters(
            diameter=300.0, velocity=18.0, angle=45.0, impact_latitude=0.0, impact_longitude=-150.0
        )
        self.inland_params = AsteroidParameters(
            diameter=300.0, velocity=18.0, angle=45.0, impact_latitude=50.0, impact_longitude=10.0
        )

    def test_seeded_source_is_deterministic(self):
        first = calculate_impact(self.inland_params, rng=random.Random(42).random)
        second = calculate_impact(self.inland_params, rng=random.Random(42).random)
        self.assertEqual(first, second)
        self.assertEqual(first.as_dict(), second.as_dict())

    def test_ocean_impact_has_tsunami(self):
        result = calculate_impact(self.ocean_params, rng=lambda: 0.5)
        self.assertTrue(result.is_ocean_impact)
        self.assertIsNotNone(result.tsunami_height_meters)
        self.assertGreater(result.tsunami_height_meters, 0)
        self.assertIn("tsunami_height_meters", result.as_dict())

    def test_land_impact_has_no_tsunami(self):
        result = calculate_impact(self.inland_params, rng=lambda: 0.9)
        self.assertFalse(result.is_ocean_impact)
        self.assertIsNone(result.tsunami_height_meters)
        self.assertNotIn("tsunami_height_meters", result.as_dict())

    def test_fallback_draw_can_make_inland_point_ocean(self):
        result = calculate_impact(self.inland_params, rng=lambda: 0.1)
        self.assertTrue(result.is_ocean_impact)

    def test_result_invariants(self):
        for seed in range(5):
            result = calculate_impact(self.inland_params, rng=random.Random(seed).random)
            self.assertEqual(result.crater_depth_km, result.crater_diameter_km / 4)
            self.assertGreaterEqual(result.crater_diameter_km, 0.1)
            self.assertGreaterEqual(result.affected_population, 0)
            self.assertEqual(result.is_ocean_impact, result.tsunami_height_meters is not None)

    def test_pipeline_stages_agree_with_helpers(self):
        result = calculate_impact(self.ocean_params, rng=lambda: 0.5)
        mass = calculate_mass(300.0)
        energy = calculate_energy(mass, 18.0)
        self.assertEqual(result.mass, mass)
        self.assertEqual(result.energy_megatons_tnt, energy)
        self.assertEqual(result.crater_diameter_km, calculate_crater_diameter(energy, 45.0, True))
        self.assertEqual(result.seismic_magnitude, calculate_seismic_magnitude(energy))

    def test_rejects_non_parameter_input(self):
        with self.assertRaises(InvalidInputError):
            calculate_impact({"diameter": 100})

    def test_extreme_diameters_blame_the_diameter(self):
        for diameter in (1e104, 1e-120):
            params = AsteroidParameters(
                diameter=diameter, velocity=20.0, angle=45.0, impact_latitude=0.0, impact_longitude=0.0
            )
            with self.assertRaises(InvalidInputError) as ctx:
                calculate_impact(params, rng=lambda: 0.5)
            self.assertIn("diameter", str(ctx.exception))

    def test_extreme_velocity_rejected(self):
        with self.assertRaises(InvalidInputError) as ctx:
            calculate_energy(calculate_mass(100.0), 1e300)
        self.assertIn("velocity", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
