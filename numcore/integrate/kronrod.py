"""
Gauss-Kronrod quadrature rules on a single interval.

Each rule embeds an ``n``-point Gauss-Legendre rule inside a ``2n+1``-point
Kronrod extension sharing its nodes. One pass over the Kronrod nodes yields
both estimates, and their absolute difference is used as the local error
estimate. Tables store the non-negative half of the symmetric node set in
decreasing order, ending with the centre node ``0``; Gauss nodes sit at the
odd positions.

References:
    - Kronrod, *Nodes and Weights of Quadrature Formulas* (1965)
    - Piessens et al., *QUADPACK* (1983), routines QK15, QK21, QK41
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from ..core.functions import ScalarFunction

_XGK15 = (
    0.991455371120812639206854697526329,
    0.949107912342758524526189684047851,
    0.864864423359769072789712788640926,
    0.741531185599394439863864773280788,
    0.586087235467691130294144845693013,
    0.405845151377397166906606412076961,
    0.207784955007898467600689403773245,
    0.000000000000000000000000000000000,
)
_WGK15 = (
    0.022935322010529224963732008058970,
    0.063092092629978553290700663189204,
    0.104790010322250183839876322541518,
    0.140653259715525918745189590510238,
    0.169004726639267902826583426598550,
    0.190350578064785409913256402421014,
    0.204432940075298892414161999234649,
    0.209482141084727828012999174891714,
)
_WG7 = (
    0.129484966168869693270611432679082,
    0.279705391489276667901467771423780,
    0.381830050505118944950369775488975,
    0.417959183673469387755102040816327,
)

_XGK21 = (
    0.995657163025808080735527280689003,
    0.973906528517171720077964012084452,
    0.930157491355708226001207180059508,
    0.865063366688984510732096688423493,
    0.780817726586416897063717578345042,
    0.679409568299024406234327365114874,
    0.562757134668604683339000099272694,
    0.433395394129247190799265943165784,
    0.294392862701460198131126603103866,
    0.148874338981631210884826001129720,
    0.000000000000000000000000000000000,
)
_WGK21 = (
    0.011694638867371874278064396062192,
    0.032558162307964727478818972459390,
    0.054755896574351996031381300244580,
    0.075039674810919952767043140916190,
    0.093125454583697605535065465083366,
    0.109387158802297641899210590325805,
    0.123491976262065851077958109831074,
    0.134709217311473325928054001771707,
    0.142775938577060080797094273138717,
    0.147739104901338491374841515972068,
    0.149445554002916905664936468389821,
)
_WG10 = (
    0.066671344308688137593568809893332,
    0.149451349150580593145776339657697,
    0.219086362515982043995534934228163,
    0.269266719309996355091226921569469,
    0.295524224714752870173892994651338,
)

_XGK41 = (
    0.998859031588277663838315576545863,
    0.993128599185094924786122388471320,
    0.981507877450250259193342994720217,
    0.963971927277913791267666131197277,
    0.940822633831754753519982722212443,
    0.912234428251325905867752441203298,
    0.878276811252281976077442995113078,
    0.839116971822218823394529061701521,
    0.795041428837551198350638833272788,
    0.746331906460150792614305070355642,
    0.693237656334751384805490711845932,
    0.636053680726515025452836696226286,
    0.575140446819710315342946036586425,
    0.510867001950827098004364050955251,
    0.443593175238725103199992213492640,
    0.373706088715419560672548177024927,
    0.301627868114913004320555356858592,
    0.227785851141645078080496195368575,
    0.152605465240922675505220241022678,
    0.076526521133497333754640409398838,
    0.000000000000000000000000000000000,
)
_WGK41 = (
    0.003073583718520531501218293246031,
    0.008600269855642942198661787950102,
    0.014626169256971252983787960308868,
    0.020388373461266523598010231432755,
    0.025882133604951158834505067096153,
    0.031287306777032798958543119323801,
    0.036600169758200798030557240707211,
    0.041668873327973686263788305936895,
    0.046434821867497674720231880926108,
    0.050944573923728691932707670050345,
    0.055195105348285994744832372419777,
    0.059111400880639572374967220648594,
    0.062653237554781168025870122174255,
    0.065834597133618422111563556969398,
    0.068648672928521619345623411885368,
    0.071054423553444068305790361723210,
    0.073030690332786667495189417658913,
    0.074582875400499188986581418362488,
    0.075704497684556674659542775376617,
    0.076377867672080736705502835038061,
    0.076600711917999656445049901530102,
)
_WG20 = (
    0.017614007139152118311861962351853,
    0.040601429800386941331039952274932,
    0.062672048334109063569506535187042,
    0.083276741576704748724758143222046,
    0.101930119817240435036750135480350,
    0.118194531961518417312377377711382,
    0.131688638449176626898494499748163,
    0.142096109318382051329298325067165,
    0.149172986472603746787828737001969,
    0.152753387130725850698084331955098,
)


@dataclass(frozen=True)
class GaussKronrodRule:
    """
    Embedded Gauss-Kronrod pair expanded to the full symmetric node set.

    Attributes:
        order: Number of Kronrod points ``2n + 1``.
        nodes: Kronrod abscissas on ``[-1, 1]`` in increasing order.
        kronrod_weights: Kronrod weights aligned with ``nodes``.
        gauss_weights: Gauss weights aligned with ``nodes`` (zero on the
            Kronrod-only nodes).
    """

    order: int
    nodes: np.ndarray
    kronrod_weights: np.ndarray
    gauss_weights: np.ndarray

    @classmethod
    def from_half_tables(cls, xgk, wgk, wg) -> "GaussKronrodRule":
        """Build the full rule from QUADPACK-style half tables."""
        xgk = np.asarray(xgk, dtype=float)
        wgk = np.asarray(wgk, dtype=float)
        gauss_half = np.zeros_like(xgk)
        # Gauss nodes occupy the odd positions of the half table.
        # For odd Gauss orders this includes the shared centre node.
        gauss_half[1::2] = np.asarray(wg, dtype=float)

        nodes = np.concatenate([-xgk[:-1], xgk[::-1]])
        kronrod_weights = np.concatenate([wgk[:-1], wgk[::-1]])
        gauss_weights = np.concatenate([gauss_half[:-1], gauss_half[::-1]])
        for arr in (nodes, kronrod_weights, gauss_weights):
            arr.setflags(write=False)
        return cls(
            order=len(nodes),
            nodes=nodes,
            kronrod_weights=kronrod_weights,
            gauss_weights=gauss_weights,
        )

    @property
    def gauss_points(self) -> int:
        return int(np.count_nonzero(self.gauss_weights))

    def estimate(self, f: ScalarFunction, low: float, high: float) -> tuple[float, float, float]:
        """
        Apply the rule to ``f`` on ``[low, high]``.

        Nodes are mapped with ``x = half * t + centre`` and weights scaled by
        ``half = (high - low) / 2``. The interval endpoints are never
        evaluated.

        Returns:
            Tuple ``(kronrod, gauss, error)`` where ``error = |kronrod - gauss|``.
        """
        half = 0.5 * (high - low)
        centre = 0.5 * (high + low)
        values = np.asarray(f.evaluate_many(half * self.nodes + centre), dtype=float)
        kronrod = half * float(np.dot(self.kronrod_weights, values))
        gauss = half * float(np.dot(self.gauss_weights, values))
        return kronrod, gauss, abs(kronrod - gauss)


_RULES: Dict[int, GaussKronrodRule] = {
    15: GaussKronrodRule.from_half_tables(_XGK15, _WGK15, _WG7),
    21: GaussKronrodRule.from_half_tables(_XGK21, _WGK21, _WG10),
    41: GaussKronrodRule.from_half_tables(_XGK41, _WGK41, _WG20),
}

SUPPORTED_ORDERS = tuple(sorted(_RULES))


def get_rule(order: int) -> GaussKronrodRule:
    """Return the Gauss-Kronrod rule with ``order`` Kronrod points.

    Raises:
        ValueError: If no table exists for ``order``.
    """
    try:
        return _RULES[int(order)]
    except KeyError:
        raise ValueError(
            f"Unsupported Gauss-Kronrod rule order {order}. "
            f"Supported orders: {list(SUPPORTED_ORDERS)}"
        ) from None


__all__ = ["GaussKronrodRule", "SUPPORTED_ORDERS", "get_rule"]
