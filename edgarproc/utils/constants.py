# Molar mass in g / mol
MOLAR_MASSES_ = {
    "N": 14.0,
    "S": 32.0,
    "CO": 28.0,
    "NO2": 46.0,
    "SO2": 64.0,
}

# Avogadro number, as used for the molecules per kg factors
AVOGADRO = 6.0225e23


def get_molar_mass(substance: str) -> float:
    """Get the molar mass of a substance in g/mol."""
    if substance not in MOLAR_MASSES_:
        raise ValueError(
            f"Unknown molar mass for substance `{substance}`."
            f"Please add it to the MOLAR_MASSES_ dictionary in {__file__}."
        )
    return MOLAR_MASSES_[substance]


def get_molecules_per_kg(substance: str) -> float:
    """Number of molecules in one kg of the substance."""
    # g/mol -> kg/mol
    return AVOGADRO / (get_molar_mass(substance) * 1e-3)


def get_mass_ratio(substance: str, element: str) -> float:
    """Mass of the element per mass of the substance (ex. N in NO2)."""
    return get_molar_mass(element) / get_molar_mass(substance)
