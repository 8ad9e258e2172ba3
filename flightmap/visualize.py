import pandas as pd
import os
from typing import List, Optional

import plotly.graph_objects as go

from flightmap.arcs import great_circle_points
from flightmap.schema import Arc, Flights


def route_map_figure(flights: Flights, n_points: int = 20, max_routes: Optional[int] = None) -> go.Figure:
    """
    Builds a world map with one great-circle line per flight and a marker
    per airport.

    Args:
        flights: Adjacency list of flights.
        n_points: Samples per great-circle line.
        max_routes: Optional cap on the number of lines drawn.
    """
    lats: List[Optional[float]] = []
    longs: List[Optional[float]] = []
    airports = {}
    drawn = 0

    for key_flights in flights.values():
        for flight in key_flights:
            if max_routes is not None and drawn >= max_routes:
                break
            for lat, long in great_circle_points(flight, n_points):
                lats.append(lat)
                longs.append(long)
            # None breaks the line between consecutive routes
            lats.append(None)
            longs.append(None)
            drawn += 1
            for node in (flight.from_node, flight.to_node):
                airports.setdefault(node.airport, node)

    fig = go.Figure()
    fig.add_trace(go.Scattergeo(
        lat=lats,
        lon=longs,
        mode='lines',
        line=dict(width=1, color='royalblue'),
        opacity=0.6,
        name='Routes',
        hoverinfo='skip',
    ))
    fig.add_trace(go.Scattergeo(
        lat=[n.lat for n in airports.values()],
        lon=[n.long for n in airports.values()],
        text=[f"{n.airport} - {n.city}, {n.country}" for n in airports.values()],
        mode='markers',
        marker=dict(size=5, color='indianred'),
        name='Airports',
    ))

    fig.update_layout(
        title_text=f'<b>Flight Routes ({drawn} shown)</b>',
        showlegend=True,
        geo=dict(projection_type='natural earth', showland=True, landcolor='rgb(243, 243, 243)',
                 countrycolor='rgb(204, 204, 204)'),
        template='plotly_white',
    )
    return fig


def arc_figure(arcs: List[Arc], width: float, height: float, bins: int = 5) -> go.Figure:
    """
    Draws projected arcs on a width x height canvas. Arcs are grouped into
    `bins` equal-width distance bands, one trace per non-empty band, shaded
    from light (short) to dark (long) blue.
    """
    fig = go.Figure()

    if arcs:
        max_distance = max(a.distance for a in arcs) or 1.0
        bands = [([], []) for _ in range(bins)]
        for arc in arcs:
            band = min(int(bins * arc.distance / max_distance), bins - 1)
            xs, ys = bands[band]
            # None breaks the line between consecutive arcs
            xs.extend([arc.x1, arc.x2, None])
            ys.extend([arc.y1, arc.y2, None])

        band_width = max_distance / bins
        for i, (xs, ys) in enumerate(bands):
            if not xs:
                continue
            shade = int(200 - 170 * (i + 1) / bins)
            fig.add_trace(go.Scatter(
                x=xs,
                y=ys,
                mode='lines',
                line=dict(width=1, color=f'rgb({shade}, {shade}, 255)'),
                name=f"{i * band_width:.0f}-{(i + 1) * band_width:.0f}",
                hoverinfo='name',
            ))

    fig.update_layout(
        title_text='<b>Projected Route Arcs</b>',
        legend_title_text='Distance',
        xaxis=dict(range=[0, width], showgrid=False, zeroline=False),
        yaxis=dict(range=[height, 0], showgrid=False, zeroline=False, scaleanchor='x'),
        template='plotly_white',
    )
    return fig


def plot_route_map(flights: Flights, output_path: str, n_points: int = 20, max_routes: Optional[int] = None):
    print("Generating route map...")
    fig = route_map_figure(flights, n_points=n_points, max_routes=max_routes)
    fig.write_html(output_path)
    print(f"Saved route map to {output_path}")


def plot_arcs(arcs: List[Arc], width: float, height: float, output_path: str):
    print("Generating arc plot...")
    fig = arc_figure(arcs, width, height)
    fig.write_html(output_path)
    print(f"Saved arc plot to {output_path}")


def plot_airport_volume(airport_kpis: pd.DataFrame, output_path: str, top_n: int = 20):
    """
    Creates and saves a stacked bar chart of departures and arrivals for the
    busiest airports.

    Args:
        airport_kpis: DataFrame from calculate_airport_kpis.
        output_path: Path to save the HTML file for the plot.
        top_n: Number of airports to show.
    """
    print("Generating airport volume plot...")
    top = airport_kpis.sort_values('total_routes', ascending=False).head(top_n)

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=top['airport'],
        y=top['departures'],
        name='Departures',
        marker_color='indianred'
    ))
    fig.add_trace(go.Bar(
        x=top['airport'],
        y=top['arrivals'],
        name='Arrivals',
        marker_color='lightsalmon'
    ))

    fig.update_layout(
        barmode='stack',
        title_text=f'<b>Route Volume - Top {len(top)} Airports</b>',
        xaxis_title='Airport',
        yaxis_title='Number of Routes',
        legend_title_text='Direction',
        template='plotly_white'
    )

    fig.write_html(output_path)
    print(f"Saved airport volume plot to {output_path}")


def plot_distance_histogram(df: pd.DataFrame, output_path: str, bins: int = 40):
    print("Generating distance histogram...")
    fig = go.Figure(go.Histogram(x=df['distance'], nbinsx=bins, marker_color='lightblue'))
    fig.update_layout(
        title_text='<b>Route Distance Distribution</b>',
        xaxis_title='Distance (km)',
        yaxis_title='Number of Routes',
        template='plotly_white',
    )
    fig.write_html(output_path)
    print(f"Saved distance histogram to {output_path}")


if __name__ == '__main__':
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    output_path = os.path.join(project_root, 'outputs')

    kpi_data_path = os.path.join(output_path, '04_airport_kpis.csv')
    if not os.path.exists(kpi_data_path):
        print(f"Error: Input file not found at {kpi_data_path}")
        print("Please run `flightmap` (flightmap/cli.py) first.")
    else:
        kpi_df = pd.read_csv(kpi_data_path)

        plots_dir = os.path.join(output_path, 'plots')
        if not os.path.exists(plots_dir):
            os.makedirs(plots_dir)

        plot_airport_volume(kpi_df, os.path.join(plots_dir, '05_airport_volume.html'))
