"""Network model and network.json / survey document I/O."""

from railscout.parser.model import (
    Edge,
    Exit,
    Node,
    NodeType,
    RailGraph,
    Segment,
    SegmentType,
    SurveyReport,
    SurveySample,
)
from railscout.parser.network import (
    dump_network,
    load_network,
    load_survey,
    parse_network,
    parse_survey,
    save_network,
)

__all__ = [
    "Edge",
    "Exit",
    "Node",
    "NodeType",
    "RailGraph",
    "Segment",
    "SegmentType",
    "SurveyReport",
    "SurveySample",
    "dump_network",
    "load_network",
    "load_survey",
    "parse_network",
    "parse_survey",
    "save_network",
]
