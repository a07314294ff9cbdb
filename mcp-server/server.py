#!/usr/bin/env python3
"""MCP Server for the Net Worth Planner.

This server exposes snapshot totals, tax estimates, debt payoff,
projections and what-if comparisons as MCP tools, allowing AI assistants
to answer questions about a household's finances.
"""

import os
import sys
import json
import asyncio
import logging
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiSnapshotTools

# stdout carries the protocol
logging.basicConfig(stream=sys.stderr, level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Create the MCP server
server = Server("networth-planner")

# Global tools instance (initialized on first call)
tools: MultiSnapshotTools | None = None


def get_tools() -> MultiSnapshotTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default snapshot can be set via NETWORTH_PLANNER_SNAPSHOT env var
        default_snapshot = os.environ.get('NETWORTH_PLANNER_SNAPSHOT')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiSnapshotTools(base_path, default_snapshot)
        logger.info("Loaded %d snapshots", len(tools.snapshots))
    return tools


# Common parameter schemas
SNAPSHOT_PARAM = {
    "type": "string",
    "description": "The snapshot name (folder in input-parameters). If not specified, uses the default snapshot. Use list_snapshots to see available snapshots."
}

YEARS_PARAM = {
    "type": "integer",
    "description": "Projection horizon in years"
}

SCENARIO_PARAM = {
    "type": "string",
    "enum": ["conservative", "moderate", "optimistic"],
    "description": "Growth scenario: conservative scales rates and payments by 0.7, moderate by 1.0, optimistic by 1.3"
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available planning tools."""
    return [
        Tool(
            name="list_snapshots",
            description="List all available household snapshots with their residence and current net worth.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_snapshots",
            description="Reload all snapshots from disk. Use this after adding, modifying, or removing snapshot.json files.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_snapshot_overview",
            description="Get the assets, debts, income, expenses, properties, stocks and goals recorded in a snapshot. Use this first to understand the household.",
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_totals",
            description="Get monthly cash flow (income, after-tax income, expenses, surplus), balances, net worth and ratios (savings rate, runway, debt-to-asset, debt-to-income).",
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_tax_breakdown",
            description="Get the estimated federal and provincial/state tax for each income item in the snapshot.",
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="compute_tax",
            description="Estimate tax on an annual income for a Canadian province/territory or US state. Residence defaults to the snapshot's.",
            inputSchema={
                "type": "object",
                "properties": {
                    "income": {
                        "type": "number",
                        "description": "Gross annual income"
                    },
                    "income_type": {
                        "type": "string",
                        "enum": ["employment", "capital-gains", "other"],
                        "description": "Kind of income (default: employment)"
                    },
                    "country": {
                        "type": "string",
                        "description": "CA or US"
                    },
                    "jurisdiction": {
                        "type": "string",
                        "description": "Two-letter province/territory or state code, e.g. ON or CA"
                    },
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": ["income"]
            }
        ),
        Tool(
            name="get_debt_payoff",
            description="Get months to payoff and total interest for each debt and mortgage, flagging payments that do not cover interest.",
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_projection",
            description="Project net worth, assets, debts and property equity month by month. Returns yearly points unless max_points is given.",
            inputSchema={
                "type": "object",
                "properties": {
                    "years": YEARS_PARAM,
                    "scenario": SCENARIO_PARAM,
                    "max_points": {
                        "type": "integer",
                        "description": "Optional: return this many evenly spaced monthly points instead of yearly points"
                    },
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_milestones",
            description="Get the months when net worth crosses $100k, $250k, $500k, $1M, $2.5M and $5M, when each goal is reached, and when the household becomes debt free.",
            inputSchema={
                "type": "object",
                "properties": {
                    "years": YEARS_PARAM,
                    "scenario": SCENARIO_PARAM,
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="compare_scenario",
            description="Compare the snapshot against a what-if change: paying off debts, changing contributions, adjusting income, or adding a windfall. Returns net worth differences at 5, 10, 20 and 30 years and how debt-free timing shifts.",
            inputSchema={
                "type": "object",
                "properties": {
                    "modification": {
                        "type": "object",
                        "description": "The what-if change",
                        "properties": {
                            "excludedDebtIds": {
                                "type": "array",
                                "items": {"type": "string"},
                                "description": "Debt ids to remove"
                            },
                            "contributionOverrides": {
                                "type": "object",
                                "additionalProperties": {"type": "number"},
                                "description": "Asset id to new monthly contribution"
                            },
                            "incomeAdjustment": {
                                "type": "number",
                                "description": "Signed change applied to the first income item"
                            },
                            "windfall": {
                                "type": "number",
                                "description": "One-time amount added to the surplus target asset"
                            }
                        }
                    },
                    "years": YEARS_PARAM,
                    "scenario": SCENARIO_PARAM,
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": ["modification"]
            }
        ),
        Tool(
            name="get_benchmarks",
            description="Compare net worth, savings rate, emergency fund and debt-to-income against national medians for the household's age group.",
            inputSchema={
                "type": "object",
                "properties": {
                    "snapshot": SNAPSHOT_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="list_jurisdictions",
            description="List the valid province/territory or state codes for tax estimation.",
            inputSchema={
                "type": "object",
                "properties": {
                    "country": {
                        "type": "string",
                        "description": "Optional: CA or US. If omitted, lists both."
                    }
                },
                "required": []
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        np_tools = get_tools()
        snapshot = arguments.get("snapshot")
        years = arguments.get("years")
        scenario = arguments.get("scenario", "moderate")

        if name == "list_snapshots":
            result = np_tools.list_snapshots()
        elif name == "reload_snapshots":
            result = np_tools.reload_snapshots()
        elif name == "get_snapshot_overview":
            result = np_tools.get_snapshot_overview(snapshot)
        elif name == "get_totals":
            result = np_tools.get_totals(snapshot)
        elif name == "get_tax_breakdown":
            result = np_tools.get_tax_breakdown(snapshot)
        elif name == "compute_tax":
            result = np_tools.compute_tax(
                arguments["income"],
                arguments.get("income_type"),
                arguments.get("country"),
                arguments.get("jurisdiction"),
                snapshot
            )
        elif name == "get_debt_payoff":
            result = np_tools.get_debt_payoff(snapshot)
        elif name == "get_projection":
            result = np_tools.get_projection(
                10 if years is None else years,
                scenario,
                arguments.get("max_points"),
                snapshot
            )
        elif name == "get_milestones":
            result = np_tools.get_milestones(30 if years is None else years, scenario, snapshot)
        elif name == "compare_scenario":
            result = np_tools.compare_scenario(
                arguments["modification"],
                10 if years is None else years,
                scenario,
                snapshot
            )
        elif name == "get_benchmarks":
            result = np_tools.get_benchmarks(snapshot)
        elif name == "list_jurisdictions":
            result = np_tools.list_jurisdictions(arguments.get("country"))
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        logger.warning("Tool %s failed: %s", name, e)
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
