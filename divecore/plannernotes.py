"""
Dive-plan notes renderer.

Turns a computed ``Diveplan`` and its ``Dive`` into a ``PlanDocument``:
header, itinerary (table or verbatim sentences), CNS/OTU, the deco
model settings, atmospheric pressure, gas consumption per cylinder
with minimum-gas and shortage warnings, an isobaric counterdiffusion
(ICD) table for trimix plans, and pO₂ warnings.  ``to_html`` turns the
document into the fragment stored in ``dive.notes``.

Plan problems are part of the document (red warning spans); nothing
here raises for bad plans.
"""

import datetime
from dataclasses import dataclass, field
from html import escape as _html_esc
from typing import List, Optional

from . import APP_NAME, APP_VERSION
from .constants import (
    PLAN_COLORS, SEGMENT_SYMBOLS, MIN_CYLINDER_RESERVE_MBAR, LOW_PO2_LIMIT,
    SHORT_SEGMENT_SECONDS, SURFACE_INTERVAL_DISPLAY_LIMIT,
)
from .dive import Dive, DiveMode, CylinderUse, update_cylinder_related_info
from .diveplan import Diveplan, DiveDataPoint, diveplan_duration
from .gas import (
    GasMix, IcdData, gasname, gasmix_distance, get_he, fill_pressures,
    isobaric_counterdiffusion, gas_compressibility_factor, isothermal_pressure,
    pressure_to_altitude,
)
from .i18n import translate
from .preferences import Preferences, DecoMode
from .units import (
    fraction, get_depth_units, get_volume_units, get_pressure_units,
)


def _tr(text: str) -> str:
    return translate(text, "plannernotes")


def _warning_html(message: str) -> str:
    return "<span style='color: {};'>{} </span> {}".format(
        PLAN_COLORS['warning'], _html_esc(_tr("Warning:")), _html_esc(message))


def _mmss(seconds: int) -> str:
    m, s = fraction(seconds, 60)
    return f"{m}:{s:02d}"


# ── Document model ───────────────────────────────────────────────────────

@dataclass
class ItineraryRow:
    """One row of the tabular itinerary.

    ``gas`` is set only where the row announces a gas (or setpoint)
    change; ``duration``/``runtime`` are ``None`` when the column is
    hidden.
    """
    symbol: str
    depth: str
    duration: Optional[str] = None
    runtime: Optional[str] = None
    gas: Optional[str] = None

    def to_html(self) -> str:
        cell = "<td style='padding-left: 10px; float: right;'>{}</td>"
        parts = ["<tr>", cell.format(self.symbol), cell.format(_html_esc(self.depth))]
        if self.duration is not None:
            parts.append(cell.format(_html_esc(self.duration)))
        if self.runtime is not None:
            parts.append(cell.format(_html_esc(self.runtime)))
        if self.gas is not None:
            parts.append("<td style='padding-left: 10px; color: {}; float: left;'><b>{}</b></td>"
                         .format(PLAN_COLORS['gas'], _html_esc(self.gas)))
        else:
            parts.append("<td>&nbsp;</td>")
        parts.append("</tr>")
        return "".join(parts)


@dataclass
class IcdRow:
    """ICD figures of one helium → nitrogen gas switch."""
    runtime: int            # s
    gas_from: str
    gas_to: str
    icd: IcdData
    ambient_mbar: float

    def to_html(self) -> str:
        color = PLAN_COLORS['icd_exceeded'] if self.icd.exceeded else PLAN_COLORS['icd_ok']
        d_he, d_n2 = self.icd.dHe, self.icd.dN2
        bar = _html_esc(_tr("bar"))
        return (
            "<tr><td rowspan='2' style='vertical-align:top;'>{:3d}{}</td>"
            "<td rowspan='2' style='vertical-align:top;'>{}&#10137;{}</td>"
            "<td style='padding-left: 10px;'>{:+5.2f}%</td>"
            "<td style='padding-left: 15px; color:{};'>{:+5.2f}%</td>"
            "<td style='padding-left: 15px;'>{:+5.2f}%</td></tr>"
            "<tr><td style='padding-left: 10px;'>{:+5.2f}{}</td>"
            "<td style='padding-left: 15px; color:{};'>{:+5.2f}{}</td>"
            "<td style='padding-left: 15px;'>{:+5.2f}{}</td></tr>"
        ).format(
            (self.runtime + 30) // 60, _html_esc(_tr("min")),
            _html_esc(self.gas_from), _html_esc(self.gas_to),
            d_he / 10.0, color, d_n2 / 10.0, 0.2 * (-d_he / 10.0),
            self.ambient_mbar * d_he / 1e6, bar,
            color, self.ambient_mbar * d_n2 / 1e6, bar,
            self.ambient_mbar * -d_he / 5e6, bar,
        )


@dataclass
class MinimumGas:
    """Minimum-gas reserve of the last bottom gas."""
    sacfactor: float
    problemsolvingtime: int
    depth: float
    depth_unit: str
    volume: float
    volume_unit: str
    pressure: float
    delta: float
    pressure_unit: str

    @property
    def sufficient(self) -> bool:
        return self.delta > 0

    def to_html(self) -> str:
        color = PLAN_COLORS['mingas_ok'] if self.sufficient else PLAN_COLORS['mingas_short']
        return (
            "<br>&nbsp;&mdash; <span style='color: {c};'>{label}</span> "
            "({based} {f:.1f}x{sac}/+{t}{mins}@{d:.0f}{du}): {v:.0f}{vu}/{p:.0f}{pu}"
            "<span style='color: {c};'>/&Delta;:{delta:+.0f}{pu}</span>"
        ).format(
            c=color, label=_html_esc(_tr("Minimum gas")), based=_html_esc(_tr("based on")),
            f=self.sacfactor, sac=_html_esc(_tr("SAC")), t=self.problemsolvingtime,
            mins=_html_esc(_tr("min")), d=self.depth, du=_html_esc(self.depth_unit),
            v=self.volume, vu=_html_esc(self.volume_unit), p=self.pressure,
            pu=_html_esc(self.pressure_unit), delta=self.delta,
        )


@dataclass
class GasConsumption:
    """Gas use of one cylinder.

    ``pressure``/``deco_pressure`` are ``None`` when the cylinder size
    is unknown and only volumes can be given.
    """
    cylinder_id: int
    gas: str
    volume: float
    deco_volume: float
    volume_unit: str
    pressure: Optional[float] = None
    deco_pressure: Optional[float] = None
    pressure_unit: str = ""
    warning: Optional[str] = None
    minimum_gas: Optional[MinimumGas] = None

    def to_html(self) -> str:
        gas = "<span style='color: {};'><b>{}</b></span>".format(
            PLAN_COLORS['gas'], _html_esc(self.gas))
        vu = _html_esc(self.volume_unit)
        pu = _html_esc(self.pressure_unit)
        if self.pressure is not None:
            text = "{:.0f}{}/{:.0f}{} {} {}".format(
                self.volume, vu, self.pressure, pu, _html_esc(_tr("of")), gas)
            if round(self.volume) > 0:
                text += " ({:.0f}{}/{:.0f}{} {})".format(
                    self.deco_volume, vu, self.deco_pressure, pu,
                    _html_esc(_tr("in planned ascent")))
        else:
            text = "{:.0f}{} {} {}".format(self.volume, vu, _html_esc(_tr("of")), gas)
            if round(self.volume) > 0:
                text += " ({:.0f}{} {})".format(
                    self.deco_volume, vu, _html_esc(_tr("during planned ascent")))
        if self.warning:
            text += "<br>&nbsp;&mdash; " + _warning_html(self.warning)
        if self.minimum_gas is not None:
            text += self.minimum_gas.to_html()
        return text + "<br>"


@dataclass
class Po2Warning:
    high: bool
    po2: float
    time: int
    gas: str
    depth: float
    decimals: int
    depth_unit: str

    @property
    def message(self) -> str:
        template = (_tr("high pO₂ value {:.2f} at {} with gas {} at depth {:.{}f} {}") if self.high
                    else _tr("low pO₂ value {:.2f} at {} with gas {} at depth {:.{}f} {}"))
        return template.format(self.po2, _mmss(self.time), self.gas,
                               self.depth, self.decimals, self.depth_unit)

    def to_html(self) -> str:
        return _warning_html(self.message) + "<br>"


@dataclass
class PlanDocument:
    """Structured rendering of a dive plan; ``to_html`` serialises it."""
    disclaimer: Optional[str] = None
    aborted: bool = False
    overlapping: bool = False
    created: str = ""
    surface_interval: Optional[int] = None
    runtime: int = 0
    variations: bool = False
    verbatim: bool = False
    show_duration: bool = True
    show_runtime: bool = True
    rows: List[ItineraryRow] = field(default_factory=list)
    verbatim_lines: List[str] = field(default_factory=list)
    cns: int = 0
    otu: int = 0
    deco_model: str = ""
    atm_pressure: int = 0
    altitude: int = 0
    altitude_unit: str = ""
    gas_header: str = ""
    gas_consumption: List[GasConsumption] = field(default_factory=list)
    istrimix: bool = False
    icd_rows: List[IcdRow] = field(default_factory=list)
    icd_warning: bool = False
    po2_warnings: List[Po2Warning] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        """Every warning message of the plan, in document order."""
        if self.aborted:
            return [_tr("Decompression calculation aborted due to excessive time")]
        res = [g.warning for g in self.gas_consumption if g.warning]
        if self.istrimix and self.icd_warning:
            res.append(_tr("Isobaric counterdiffusion conditions exceeded"))
        res.extend(w.message for w in self.po2_warnings)
        return res

    def _header_html(self) -> str:
        title = "<b>{} ({}) {}</b>".format(
            _html_esc(APP_NAME), _html_esc(APP_VERSION), _html_esc(_tr("dive plan")))
        if self.overlapping:
            return "<div>{} {}<br></div>".format(
                title, _html_esc(_tr("(overlapping dives detected)")))
        if self.surface_interval is None or self.surface_interval >= SURFACE_INTERVAL_DISPLAY_LIMIT:
            line = "{} {} {}".format(title, _html_esc(_tr("created on")), _html_esc(self.created))
        else:
            h, m = fraction(self.surface_interval // 60, 60)
            line = "{} ({} {}:{:02d}) {} {}".format(
                title, _html_esc(_tr("surface interval")), h, m,
                _html_esc(_tr("created on")), _html_esc(self.created))
        runtime = _tr("Runtime: {}min").format(self.runtime)
        if self.variations:
            runtime += "VARIATIONS"
        return "<div>{}<br>{}<br></div>".format(line, _html_esc(runtime))

    def _itinerary_html(self) -> str:
        if self.verbatim:
            return "<div>{}</div>".format("".join(_html_esc(line) + "<br>"
                                                  for line in self.verbatim_lines))
        head = ["<table><thead><tr><th></th><th>{}</th>".format(_html_esc(_tr("depth")))]
        if self.show_duration:
            head.append("<th style='padding-left: 10px;'>{}</th>".format(_html_esc(_tr("duration"))))
        if self.show_runtime:
            head.append("<th style='padding-left: 10px;'>{}</th>".format(_html_esc(_tr("runtime"))))
        head.append("<th style='padding-left: 10px; float: left;'>{}</th></tr></thead>"
                    "<tbody style='float: left;'>".format(_html_esc(_tr("gas"))))
        body = "".join(row.to_html() for row in self.rows)
        return "".join(head) + body + "</tbody></table><br>"

    def _icd_html(self) -> str:
        headers = (
            "<tr><td align='left'><b>{}</b></td><td align='center'><b>{}</b></td>"
            "<td style='padding-left: 15px;'><b>&#916;He</b></td>"
            "<td style='padding-left: 20px;'><b>&#916;N&#8322;</b></td>"
            "<td style='padding-left: 10px;'><b>{} &#916;N&#8322;</b></td></tr>"
        ).format(_html_esc(_tr("runtime")), _html_esc(_tr("gaschange")), _html_esc(_tr("max")))
        html = "<div>{}:<table>{}{}</table>".format(
            _html_esc(_tr("Isobaric counterdiffusion information")), headers,
            "".join(r.to_html() for r in self.icd_rows))
        if self.icd_warning:
            html += _warning_html(_tr("Isobaric counterdiffusion conditions exceeded"))
        return html + "<br></div>"

    def to_html(self) -> str:
        if self.aborted:
            return "<div>{}<br></div>".format(
                _warning_html(_tr("Decompression calculation aborted due to excessive time")))
        parts = ["<div>"]
        if self.disclaimer:
            parts.append("<div><b>{}</b><br></div>".format(_html_esc(self.disclaimer)))
        parts.append(self._header_html())
        if self.overlapping:
            parts.append("</div>")
            return "".join(parts)
        parts.append(self._itinerary_html())
        parts.append("<div>{}: {}%<br>{}: {}<br></div>".format(
            _html_esc(_tr("CNS")), self.cns, _html_esc(_tr("OTU")), self.otu))
        parts.append("<div>{}<br>{}<br></div>".format(
            _html_esc(self.deco_model),
            _html_esc(_tr("ATM pressure: {}mbar ({}{})").format(
                self.atm_pressure, self.altitude, self.altitude_unit))))
        parts.append("<div>{}<br>{}</div>".format(
            _html_esc(self.gas_header), "".join(g.to_html() for g in self.gas_consumption)))
        if self.istrimix:
            parts.append(self._icd_html())
        if self.po2_warnings:
            parts.append("<div>{}</div>".format("".join(w.to_html() for w in self.po2_warnings)))
        parts.append("</div>")
        return "".join(parts)


# ── Rendering ────────────────────────────────────────────────────────────

def _deco_name(mode: DecoMode) -> str:
    return _tr("VPM-B") if mode == DecoMode.VPMB else _tr("BUHLMANN")


def _disclaimer(mode: DecoMode) -> str:
    return _tr("DISCLAIMER / WARNING: THIS IS A NEW IMPLEMENTATION OF THE {} "
               "ALGORITHM AND A DIVE PLANNER IMPLEMENTATION BASED ON THAT WHICH HAS "
               "RECEIVED ONLY A LIMITED AMOUNT OF TESTING. WE STRONGLY RECOMMEND NOT TO "
               "PLAN DIVES SIMPLY BASED ON THE RESULTS GIVEN HERE.").format(_deco_name(mode))


def _deco_model_text(plan: Diveplan, mode: DecoMode) -> str:
    if mode == DecoMode.VPMB:
        if plan.vpmb_conservatism == 0:
            text = _tr("Deco model: VPM-B at nominal conservatism")
        else:
            text = _tr("Deco model: VPM-B at +{} conservatism").format(plan.vpmb_conservatism)
        if plan.eff_gflow:
            text += _tr(", effective GF={}/{}").format(plan.eff_gflow, plan.eff_gfhigh)
        return text
    if mode == DecoMode.RECREATIONAL:
        return _tr("Deco model: Recreational mode based on Bühlmann ZHL-16B "
                   "with GFLow = {}% and GFHigh = {}%").format(plan.gflow, plan.gfhigh)
    return _tr("Deco model: Bühlmann ZHL-16C with GFLow = {}% and GFHigh = {}%").format(
        plan.gflow, plan.gfhigh)


def _sp_suffix(setpoint: int) -> str:
    return _tr("(SP = {:.1f}bar)").format(setpoint / 1000.0)


class _ItineraryBuilder:
    """Walks the waypoints once and fills rows, verbatim lines and ICD rows."""

    def __init__(self, doc: PlanDocument, plan: Diveplan, dive: Dive, prefs: Preferences):
        self.doc = doc
        self.plan = plan
        self.dive = dive
        self.prefs = prefs
        self.lastbottomdp: Optional[DiveDataPoint] = None

    def _add_icd(self, old: GasMix, new: GasMix, runtime: int, depth: int) -> None:
        if old is None or get_he(old) <= 0:
            return
        icd = isobaric_counterdiffusion(old, new)
        if icd.dHe >= 0:
            return
        if icd.exceeded:
            self.doc.icd_warning = True
        self.doc.icd_rows.append(IcdRow(runtime=runtime, gas_from=gasname(old), gas_to=gasname(new),
                                        icd=icd, ambient_mbar=self.dive.depth_to_mbar(depth)))

    def _verbatim_line(self, verb: str, dp: DiveDataPoint, lasttime: int, gas: GasMix) -> str:
        value, decimals, unit = get_depth_units(dp.depth, self.prefs.units)
        if verb == "transition":
            template = _tr("Transition to {:.{}f} {} in {} min - runtime {} on {}")
        else:
            template = _tr("Stay at {:.{}f} {} for {} min - runtime {} on {}")
        line = template.format(value, decimals, unit, _mmss(dp.time - lasttime),
                               _mmss(dp.time), gasname(gas))
        if dp.setpoint:
            line += " " + _sp_suffix(dp.setpoint)
        return line

    def run(self) -> None:
        prefs = self.prefs
        verbatim = prefs.verbatim_plan
        points = self.plan.points
        lastdepth = lasttime = newdepth = lastprintdepth = 0
        lastprintsetpoint = -1
        lastprintgasmix: Optional[GasMix] = None
        lastentered = True

        for i, dp in enumerate(points):
            isascent = dp.depth < lastdepth
            if dp.time == 0:
                continue
            gasmix = self.dive.get_gasmix(dp.cylinderid)
            raw_next = points[i + 1] if i + 1 < len(points) else None
            nextdp = next((p for p in points[i + 1:] if p.time != 0), None)
            newgasmix = self.dive.get_gasmix(nextdp.cylinderid) if nextdp is not None else None
            gaschange_after = nextdp is not None and bool(
                gasmix_distance(gasmix, newgasmix) or dp.setpoint != nextdp.setpoint)
            gaschange_before = (lastprintgasmix is None
                                or bool(gasmix_distance(lastprintgasmix, gasmix))
                                or lastprintsetpoint != dp.setpoint)
            if verbatim and lastprintgasmix is None:
                lastprintgasmix = gasmix

            # Skip legs that carry no information
            if (not dp.entered and nextdp is not None and dp.depth != lastdepth
                    and nextdp.depth != dp.depth and not gaschange_before and not gaschange_after):
                continue
            if (dp.time - lasttime < SHORT_SEGMENT_SECONDS and lastdepth == dp.depth
                    and not (gaschange_after and raw_next is not None and dp.depth != raw_next.depth)):
                continue

            if dp.entered and nextdp is not None and not nextdp.entered:
                self.lastbottomdp = dp

            if verbatim:
                if dp.depth != lastprintdepth:
                    if (prefs.display_transitions or dp.entered or raw_next is None
                            or (gaschange_after and dp.depth != nextdp.depth)):
                        self.doc.verbatim_lines.append(
                            self._verbatim_line("transition", dp, lasttime, gasmix))
                    newdepth = dp.depth
                    lasttime = dp.time
                elif (nextdp is not None and dp.depth != nextdp.depth) or gaschange_after:
                    self.doc.verbatim_lines.append(self._verbatim_line("stay", dp, lasttime, gasmix))
                    newdepth = dp.depth
                    lasttime = dp.time
            elif (prefs.display_transitions or dp.entered or raw_next is None
                  or (nextdp is not None and dp.depth != nextdp.depth)
                  or (not isascent and gaschange_before and nextdp is not None
                      and dp.depth != nextdp.depth)
                  or (gaschange_after and lastentered) or (gaschange_after and not isascent)
                  or (isascent and gaschange_after and nextdp is not None
                      and dp.depth != nextdp.depth)
                  or (lastentered and not dp.entered)):
                if isascent:
                    symbol = SEGMENT_SYMBOLS['ascent']
                elif dp.depth > lastdepth:
                    symbol = SEGMENT_SYMBOLS['descent']
                elif dp.entered:
                    symbol = SEGMENT_SYMBOLS['constant']
                else:
                    symbol = SEGMENT_SYMBOLS['deco']
                value, _, unit = get_depth_units(dp.depth, prefs.units)
                row = ItineraryRow(symbol=symbol, depth=_tr("{:3.0f}{}").format(value, unit))
                if prefs.display_duration:
                    row.duration = _tr("{:3d}min").format((dp.time - lasttime + 30) // 60)
                if prefs.display_runtime:
                    row.runtime = _tr("{:3d}min").format((dp.time + 30) // 60)

                # A gas change is normally shown on the following stop; show it on the
                # ascent row only when no stop follows.
                if ((isascent or dp.entered) and gaschange_after and raw_next is not None
                        and (dp.depth != nextdp.depth or nextdp.entered)):
                    row.gas = gasname(newgasmix)
                    if dp.setpoint:
                        row.gas += " " + _sp_suffix(nextdp.setpoint)
                    elif isascent:
                        self._add_icd(lastprintgasmix, newgasmix, dp.time, dp.depth)
                    lastprintsetpoint = nextdp.setpoint
                    lastprintgasmix = newgasmix
                    gaschange_after = False
                elif gaschange_before:
                    row.gas = gasname(gasmix)
                    if dp.setpoint:
                        row.gas += " " + _sp_suffix(dp.setpoint)
                    else:
                        self._add_icd(lastprintgasmix, gasmix, lasttime, dp.depth)
                    lastprintsetpoint = dp.setpoint
                    lastprintgasmix = gasmix
                    gaschange_after = False
                self.doc.rows.append(row)
                newdepth = dp.depth
                lasttime = dp.time

            if gaschange_after and verbatim:
                line = _tr("Switch gas to {}").format(gasname(newgasmix))
                if nextdp.setpoint:
                    line += " " + _sp_suffix(nextdp.setpoint)
                elif isascent:
                    self._add_icd(lastprintgasmix, newgasmix, dp.time, dp.depth)
                self.doc.verbatim_lines.append(line)
                lastprintgasmix = newgasmix

            lastprintdepth = newdepth
            lastdepth = dp.depth
            lastentered = dp.entered


def _gas_consumption(dive: Dive, prefs: Preferences,
                     lastbottomdp: Optional[DiveDataPoint]) -> List[GasConsumption]:
    units = prefs.units
    entries = []
    for idx, cyl in enumerate(dive.cylinders):
        if cyl.is_empty():
            continue
        volume, _, vunit = get_volume_units(cyl.gas_used, units)
        deco_volume, _, _ = get_volume_units(cyl.deco_gas_used, units)
        entry = GasConsumption(cylinder_id=idx, gas=gasname(cyl.gasmix), volume=volume,
                               deco_volume=deco_volume, volume_unit=vunit)
        entries.append(entry)
        size = cyl.type.size
        if not size or not cyl.start:
            continue

        end_bar = cyl.end / 1000.0
        remaining_gas = round(end_bar * size / gas_compressibility_factor(cyl.gasmix, end_bar))
        deco_pressure_mbar = isothermal_pressure(
            cyl.gasmix, 1.0, remaining_gas + cyl.deco_gas_used, size) * 1000 - cyl.end
        entry.deco_pressure, entry.pressure_unit = get_pressure_units(round(deco_pressure_mbar), units)
        entry.pressure, _ = get_pressure_units(cyl.start - cyl.end, units)

        if cyl.end < MIN_CYLINDER_RESERVE_MBAR:
            entry.warning = _tr("this is more gas than available in the specified cylinder!")
        elif remaining_gas < cyl.deco_gas_used:
            entry.warning = _tr("not enough reserve for gas sharing on ascent!")
        elif (lastbottomdp is not None and idx == lastbottomdp.cylinderid
              and dive.dc.divemode == DiveMode.OC and prefs.deco_mode != DecoMode.RECREATIONAL):
            factor = prefs.sacfactor / 100.0
            mingas_ml = round(factor * prefs.problemsolvingtime * prefs.bottomsac
                              * dive.depth_to_bar(lastbottomdp.depth)
                              + factor * cyl.deco_gas_used)
            lastbottomdp.minimum_gas = round(
                isothermal_pressure(cyl.gasmix, 1.0, mingas_ml, size) * 1000)
            if cyl.start > lastbottomdp.minimum_gas:
                mingas_volume, _, _ = get_volume_units(mingas_ml, units)
                mingas_pressure, punit = get_pressure_units(lastbottomdp.minimum_gas, units)
                delta, _ = get_pressure_units(
                    round(cyl.end + deco_pressure_mbar - lastbottomdp.minimum_gas), units)
                depth, _, dunit = get_depth_units(lastbottomdp.depth, units)
                entry.minimum_gas = MinimumGas(
                    sacfactor=factor, problemsolvingtime=prefs.problemsolvingtime,
                    depth=depth, depth_unit=dunit, volume=mingas_volume, volume_unit=vunit,
                    pressure=mingas_pressure, delta=delta, pressure_unit=punit)
            else:
                entry.warning = _tr("required minimum gas for ascent already exceeding "
                                    "start pressure of cylinder!")
    return entries


def _po2_warnings(plan: Diveplan, dive: Dive, prefs: Preferences) -> List[Po2Warning]:
    if dive.dc.divemode == DiveMode.CCR:
        return []
    res = []
    for dp in plan.points:
        if dp.time == 0:
            continue
        mix = dive.get_gasmix(dp.cylinderid)
        po2 = fill_pressures(dive.depth_to_atm(dp.depth), mix).o2
        limit = (prefs.bottompo2 if dp.entered else prefs.decopo2) / 1000.0
        if po2 > limit or po2 < LOW_PO2_LIMIT:
            depth, decimals, unit = get_depth_units(dp.depth, prefs.units)
            res.append(Po2Warning(high=po2 > limit, po2=po2, time=dp.time, gas=gasname(mix),
                                  depth=depth, decimals=decimals, depth_unit=unit))
    return res


def build_plan_document(plan: Diveplan, dive: Dive, prefs: Preferences,
                        show_disclaimer: bool = False, error: bool = False,
                        created: Optional[str] = None) -> PlanDocument:
    """Render *plan* into a ``PlanDocument`` (updates CNS/OTU on *dive*)."""
    mode = prefs.deco_mode if isinstance(prefs.deco_mode, DecoMode) else DecoMode.BUEHLMANN
    if error:
        return PlanDocument(aborted=True)

    doc = PlanDocument(
        disclaimer=_disclaimer(mode) if show_disclaimer else None,
        created=created or datetime.date.today().isoformat(),
        surface_interval=plan.surface_interval,
        runtime=diveplan_duration(plan),
        variations=prefs.display_variations and mode != DecoMode.RECREATIONAL,
        verbatim=prefs.verbatim_plan,
        show_duration=prefs.display_duration,
        show_runtime=prefs.display_runtime,
    )
    if plan.surface_interval is not None and plan.surface_interval < 0:
        doc.overlapping = True
        return doc

    doc.istrimix = any(c.cylinder_use == CylinderUse.OC_GAS and c.gasmix.he > 0
                       for c in dive.cylinders)
    builder = _ItineraryBuilder(doc, plan, dive, prefs)
    builder.run()

    dive.cns = 0
    dive.maxcns = 0
    update_cylinder_related_info(dive)
    doc.cns = dive.cns
    doc.otu = dive.otu

    doc.deco_model = _deco_model_text(plan, mode)
    doc.atm_pressure = plan.surface_pressure
    altitude, _, doc.altitude_unit = get_depth_units(
        pressure_to_altitude(plan.surface_pressure), prefs.units)
    doc.altitude = int(altitude)

    if dive.dc.divemode == DiveMode.CCR:
        doc.gas_header = _tr("Gas consumption (CCR legs excluded):")
    else:
        bottomsac, decimals, sacunit = get_volume_units(prefs.bottomsac, prefs.units)
        decosac, _, _ = get_volume_units(prefs.decosac, prefs.units)
        if decimals == 1:
            decimals = 0
        doc.gas_header = _tr("Gas consumption (based on SAC {:.{}f}|{:.{}f}{}/min):").format(
            bottomsac, decimals, decosac, decimals, sacunit)
    doc.gas_consumption = _gas_consumption(dive, prefs, builder.lastbottomdp)
    doc.po2_warnings = _po2_warnings(plan, dive, prefs)
    return doc


def add_plan_to_notes(plan: Diveplan, dive: Dive, prefs: Preferences,
                      show_disclaimer: bool = False, error: bool = False,
                      created: Optional[str] = None) -> Optional[PlanDocument]:
    """Render *plan* into ``dive.notes``.

    Returns the document, or ``None`` for an empty plan (notes are then
    left as they are).
    """
    if plan.is_empty():
        return None
    doc = build_plan_document(plan, dive, prefs, show_disclaimer, error, created)
    dive.notes = doc.to_html()
    return doc
