#!/usr/bin/env python3
"""
Sanity check script to verify the basic flow against a running server.
This script:
1. Checks the health endpoint
2. Lists events
3. Verifies that unauthenticated event creation is refused
4. With a session token, creates an event inside the geofence
5. With a session token, verifies an event outside the geofence is rejected

Usage:
    python create_demo_data.py            # prints session tokens
    HANGOUTZ_TOKEN=<token> python scripts/sanity_check.py
"""

import os
import asyncio
from datetime import datetime, timedelta, timezone

import httpx
from rich.console import Console
from rich.table import Table

# Create console for nice output
console = Console()

# API URL (can be overridden with environment variable)
API_URL = os.getenv("API_URL", "http://localhost:8000")
TOKEN = os.getenv("HANGOUTZ_TOKEN")

def sample_event(lat: float, lng: float) -> dict:
    starts = datetime.now(timezone.utc) + timedelta(days=1)
    return {
        "title": "Sanity check meetup",
        "description": "Created by scripts/sanity_check.py",
        "location": "Telibandha Lake",
        "category": "🧘 Wellness",
        "date_time": starts.isoformat(),
        "coordinates": {"lat": lat, "lng": lng},
    }

async def check_health(client: httpx.AsyncClient) -> bool:
    """Check if the API is healthy"""
    console.print("\n[bold blue]Checking API health...[/bold blue]")
    try:
        response = await client.get(f"{API_URL}/health")
    except httpx.HTTPError as e:
        console.print(f"[red]✗ Error connecting to API: {str(e)}[/red]")
        return False

    if response.status_code == 200:
        console.print("[green]✓ API is healthy![/green]")
        return True
    console.print(f"[red]✗ API returned status {response.status_code}[/red]")
    return False

async def list_events(client: httpx.AsyncClient) -> bool:
    console.print("\n[bold blue]Listing events...[/bold blue]")
    response = await client.get(f"{API_URL}/events")
    if response.status_code != 200:
        console.print(f"[red]✗ Failed to list events: {response.status_code} - {response.text}[/red]")
        return False

    events = response.json()
    table = Table(title=f"{len(events)} events")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Participants")
    for event in events:
        table.add_row(str(event["id"]), event["title"], event["category"],
                      f"{event['participant_count']}/{event['max_participants']}")
    console.print(table)
    return True

async def check_auth_required(client: httpx.AsyncClient) -> bool:
    console.print("\n[bold blue]Creating an event without a session token...[/bold blue]")
    response = await client.post(f"{API_URL}/events/create", json=sample_event(21.2514, 81.6296))
    if response.status_code == 401:
        console.print("[green]✓ Unauthenticated request refused[/green]")
        return True
    console.print(f"[red]✗ Expected 401, got {response.status_code}[/red]")
    return False

async def check_geofence(client: httpx.AsyncClient) -> bool:
    headers = {"Authorization": f"Bearer {TOKEN}"}

    console.print("\n[bold blue]Creating an event inside the geofence...[/bold blue]")
    response = await client.post(f"{API_URL}/events/create", json=sample_event(21.2445, 81.6630), headers=headers)
    if response.status_code != 201:
        console.print(f"[red]✗ Failed to create event: {response.status_code} - {response.text}[/red]")
        return False
    console.print(f"[green]✓ Event created (ID: {response.json()['id']})[/green]")

    console.print("\n[bold blue]Creating an event in Nagpur (outside the geofence)...[/bold blue]")
    response = await client.post(f"{API_URL}/events/create", json=sample_event(21.1458, 79.0882), headers=headers)
    if response.status_code == 400:
        console.print(f"[green]✓ Rejected: {response.json()['detail']}[/green]")
        return True
    console.print(f"[red]✗ Expected 400, got {response.status_code}[/red]")
    return False

async def main():
    async with httpx.AsyncClient(timeout=10.0) as client:
        if not await check_health(client):
            return
        results = [await list_events(client), await check_auth_required(client)]
        if TOKEN:
            results.append(await check_geofence(client))
        else:
            console.print("\n[yellow]! HANGOUTZ_TOKEN not set, skipping geofence checks[/yellow]")

    if all(results):
        console.print("\n[bold green]All sanity checks passed[/bold green]")
    else:
        console.print("\n[bold red]Some sanity checks failed[/bold red]")

if __name__ == "__main__":
    asyncio.run(main())
