"""
Gas model for Divecore.

Gas mixtures, partial pressures, ambient pressure at depth, isobaric
counterdiffusion (ICD) arithmetic and real-gas compressibility.

Gas fractions are integer permille.  An O₂ fraction of 0 is the
historical encoding of air and is read back as 209‰.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .constants import (
    O2_IN_AIR, SURFACE_PRESSURE, ATM_MBAR, ICD_RATIO,
    MAX_COMPRESSIBILITY_BAR, ALTITUDE_SCALE_MM,
    SEAWATER_SALINITY, FRESHWATER_SALINITY, DC_SEAWATER_SALINITY,
    FRESHWATER_LIMIT, SALTYWATER_LIMIT, EN13319_LIMIT,
)
from .i18n import translate


# ── Gas mixtures ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GasMix:
    """Breathing gas, fractions in permille.

    Parameters
    ----------
    o2 : int
        Oxygen permille; ``0`` is read as air.
    he : int
        Helium permille.
    """
    o2: int = 0
    he: int = 0


AIR = GasMix()
OXYGEN = GasMix(o2=1000)


def get_o2(mix: GasMix) -> int:
    return mix.o2 or O2_IN_AIR


def get_he(mix: GasMix) -> int:
    return mix.he


def get_n2(mix: GasMix) -> int:
    return 1000 - get_o2(mix) - get_he(mix)


def gasmix_is_air(mix: GasMix) -> bool:
    o2 = mix.o2
    return mix.he == 0 and (o2 == 0 or O2_IN_AIR - 1 <= o2 <= O2_IN_AIR + 1)


def gasname(mix: GasMix) -> str:
    """Human readable gas name: air, oxygen, EAN32, 21/35 …"""
    if gasmix_is_air(mix):
        return translate("air", "gas")
    if mix.he == 0 and mix.o2 == 1000:
        return translate("oxygen", "gas")
    o2 = (get_o2(mix) + 5) // 10
    if mix.he == 0:
        return f"EAN{o2}"
    return f"{o2}/{(mix.he + 5) // 10}"


def gasmix_distance(a: GasMix, b: GasMix) -> int:
    """Squared O₂/He distance in permille²; zero means the same gas."""
    delta_o2 = get_o2(a) - get_o2(b)
    delta_he = get_he(a) - get_he(b)
    return delta_o2 * delta_o2 + delta_he * delta_he


# ── Partial pressures ────────────────────────────────────────────────────

@dataclass(frozen=True)
class GasPressures:
    """Partial pressures in the same unit as the ambient pressure."""
    o2: float = 0.0
    n2: float = 0.0
    he: float = 0.0


def fill_pressures(amb_pressure: float, mix: GasMix, po2: float = 0.0) -> GasPressures:
    """Partial pressures of *mix* at *amb_pressure*.

    With ``po2 > 0`` the loop is treated as a closed circuit held at
    that setpoint (capped at ambient); the rest of the loop is diluent
    in its inert ratio.  Otherwise the mix is breathed open circuit.
    """
    if po2 <= 0:
        return GasPressures(
            o2=get_o2(mix) / 1000.0 * amb_pressure,
            n2=get_n2(mix) / 1000.0 * amb_pressure,
            he=get_he(mix) / 1000.0 * amb_pressure,
        )
    o2 = min(po2, amb_pressure)
    if get_o2(mix) == 1000:
        return GasPressures(o2=o2)
    he = (amb_pressure - o2) * get_he(mix) / (1000.0 - get_o2(mix))
    return GasPressures(o2=o2, n2=amb_pressure - o2 - he, he=he)


# ── Isobaric counterdiffusion ────────────────────────────────────────────

@dataclass(frozen=True)
class IcdData:
    """Result of an ICD check for one gas switch.

    Parameters
    ----------
    dN2 : int
        Change of nitrogen fraction in permille (new − old).
    dHe : int
        Change of helium fraction in permille (new − old).
    exceeded : bool
        ``True`` if the switch violates the 1:5 rule.
    """
    dN2: int
    dHe: int
    exceeded: bool

    @property
    def max_dn2(self) -> float:
        """Largest admissible nitrogen increase in permille."""
        return -self.dHe / ICD_RATIO


def isobaric_counterdiffusion(old: GasMix, new: GasMix) -> IcdData:
    """Check a switch from *old* to *new* against the ICD 1:5 rule.

    ICD is a risk when helium is replaced by nitrogen: the nitrogen
    increase must stay below a fifth of the helium decrease.
    """
    d_n2 = get_n2(new) - get_n2(old)
    d_he = get_he(new) - get_he(old)
    exceeded = (get_he(old) > 0 and d_n2 > 0 and d_he < 0
                and ICD_RATIO * d_n2 > -d_he)
    return IcdData(dN2=d_n2, dHe=d_he, exceeded=exceeded)


def gaschange_icon(mix: GasMix, icd: bool = False) -> str:
    """Icon category for a gas-change event on the profile."""
    if mix.he:
        kind = "trimix"
    elif gasmix_is_air(mix):
        kind = "air"
    elif mix.o2 == 1000:
        kind = "oxygen"
    else:
        kind = "ean"
    return f"{kind}-icd" if icd else kind


def icd_tooltip(old: GasMix, new: GasMix) -> str:
    """One-line ICD summary for a gas switch; empty if helium does not drop."""
    icd = isobaric_counterdiffusion(old, new)
    if icd.dHe >= 0:
        return ""
    return "{}: {}={:+.3g}% {}={:+.3g}%{}{:+.3g}%".format(
        translate("ICD", "gas"),
        translate("ΔHe", "gas"), icd.dHe / 10.0,
        translate("ΔN₂", "gas"), icd.dN2 / 10.0,
        ">" if icd.exceeded else "<",
        round(-icd.dHe / 5.0) / 10.0,
    )


# ── Real-gas behaviour ───────────────────────────────────────────────────

# Virial coefficients (Z − 1 as a cubic in bar) per gas, fitted to
# tabulated compressibility data at room temperature.
_O2_COEFFICIENTS = (-0.00071809207370253, +0.00000281852572807, -0.00000000150290620)
_N2_COEFFICIENTS = (-0.00021926035329221, +0.00000292844845531, -0.00000000207613482)
_HE_COEFFICIENTS = (+0.00047961098687979, -0.00000004077670019, -0.00000000000077707)


def _virial_m1(coefficients, x: float) -> float:
    return x * coefficients[0] + x * x * coefficients[1] + x * x * x * coefficients[2]


def gas_compressibility_factor(mix: GasMix, bar: float) -> float:
    """Compressibility factor Z of *mix* at *bar*."""
    bar = min(bar, MAX_COMPRESSIBILITY_BAR)
    o2 = get_o2(mix)
    he = get_he(mix)
    z_m1 = (_virial_m1(_O2_COEFFICIENTS, bar) * o2
            + _virial_m1(_HE_COEFFICIENTS, bar) * he
            + _virial_m1(_N2_COEFFICIENTS, bar) * (1000 - o2 - he))
    return z_m1 * 0.001 + 1.0


def isothermal_pressure(mix: GasMix, p1: float, volume1: float, volume2: float) -> float:
    """Pressure in bar after moving gas at *p1* bar from *volume1* into *volume2*."""
    p_ideal = p1 * volume1 / volume2 / gas_compressibility_factor(mix, p1)
    return p_ideal * gas_compressibility_factor(mix, p_ideal)


def gas_volume(mix: GasMix, size_ml: int, mbar: int) -> float:
    """Surface-equivalent gas volume in mℓ held by a cylinder at *mbar*."""
    bar = mbar / 1000.0
    return size_ml * bar / gas_compressibility_factor(mix, bar)


# ── Ambient pressure ─────────────────────────────────────────────────────

def _effective_salinity(salinity: int) -> int:
    if not salinity:
        return SEAWATER_SALINITY
    if salinity < 500:
        # old files stored only the excess over fresh water
        return salinity + FRESHWATER_SALINITY
    return salinity


def depth_to_mbar(depth_mm: int, surface_mbar: int = 0, salinity: int = 0) -> float:
    """Absolute pressure in mbar at *depth_mm* of water of *salinity* (g/10ℓ)."""
    surface = surface_mbar or SURFACE_PRESSURE
    mbar_per_mm = _effective_salinity(salinity) * 0.981 / 100000.0
    return surface + depth_mm * mbar_per_mm


def depth_to_bar(depth_mm: int, surface_mbar: int = 0, salinity: int = 0) -> float:
    return depth_to_mbar(depth_mm, surface_mbar, salinity) / 1000.0


def depth_to_atm(depth_mm: int, surface_mbar: int = 0, salinity: int = 0) -> float:
    return depth_to_mbar(depth_mm, surface_mbar, salinity) / ATM_MBAR


def mbar_to_depth(mbar: float, surface_mbar: int = 0, salinity: int = 0) -> int:
    """Inverse of ``depth_to_mbar``; never returns a negative depth."""
    surface = surface_mbar or SURFACE_PRESSURE
    mbar_per_mm = _effective_salinity(salinity) * 0.981 / 100000.0
    return max(0, int(round((mbar - surface) / mbar_per_mm)))


def pressure_to_altitude(surface_mbar: int) -> int:
    """Rough altitude in mm of a site with the given surface pressure."""
    if surface_mbar <= 0:
        return 0
    return int(math.log(SURFACE_PRESSURE / surface_mbar) * ALTITUDE_SCALE_MM)


# ── Water type ───────────────────────────────────────────────────────────

class WaterType(Enum):
    FRESH = "Fresh"
    SALTY = "Salty"
    EN13319 = "EN13319"
    SEA = "Salt"


def water_type(salinity: int) -> WaterType:
    """Classify a water density in g/10ℓ."""
    if salinity < FRESHWATER_LIMIT:
        return WaterType.FRESH
    if salinity < SALTYWATER_LIMIT:
        return WaterType.SALTY
    if salinity < EN13319_LIMIT:
        return WaterType.EN13319
    return WaterType.SEA


def dc_salinity_overwritten(dc_salinity: int, user_salinity: int,
                            dc_seawater_salinity: int = DC_SEAWATER_SALINITY) -> bool:
    """Whether the user's water density really differs from the dive computer's.

    Dive computers report seawater as *dc_seawater_salinity* while the
    log uses ``SEAWATER_SALINITY``; two values that are both at or
    above the dive-computer seawater value describe the same water.
    """
    if not dc_salinity or not user_salinity or dc_salinity == user_salinity:
        return False
    return dc_salinity < dc_seawater_salinity or user_salinity < dc_seawater_salinity
