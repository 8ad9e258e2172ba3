import streamlit as st
import pandas as pd
import json
import os

from flightmap.arcs import build_arcs
from flightmap.config import (
    AIRLINE_KPIS_FILE, AIRPORT_KPIS_FILE, DATAPOINTS_FILE, FLIGHTS_FILE, load_settings,
)
from flightmap.graph import flights_from_dict
from flightmap.kpis import distance_summary, find_busiest_airports, find_longest_routes
from flightmap.load import read_output_csv
from flightmap.visualize import arc_figure, route_map_figure

# --- Page Configuration ---
st.set_page_config(
    page_title="Flight Route Explorer",
    page_icon="✈️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# --- Helper Functions ---

@st.cache_data
def load_data(file_path):
    """Loads a pipeline CSV with caching; airport codes and names stay strings."""
    if os.path.exists(file_path):
        return read_output_csv(file_path)
    return None


@st.cache_resource
def load_flights(file_path):
    """Loads the flight adjacency list written by the pipeline."""
    if os.path.exists(file_path):
        with open(file_path, encoding='utf-8') as f:
            return flights_from_dict(json.load(f))
    return None


# --- Data Loading ---
SETTINGS = load_settings()

routes_df = load_data(SETTINGS.output_file(DATAPOINTS_FILE))
airport_kpi_df = load_data(SETTINGS.output_file(AIRPORT_KPIS_FILE))
airline_kpi_df = load_data(SETTINGS.output_file(AIRLINE_KPIS_FILE))
flights = load_flights(SETTINGS.output_file(FLIGHTS_FILE))


# --- Sidebar Navigation ---
st.sidebar.title("Navigation")
page = st.sidebar.radio("Go to", ["Route Map", "Airport Explorer", "Airline Overview"])

# --- Main App ---

if page == "Route Map":
    st.title("✈️ Route Map")

    if flights is not None and routes_df is not None:
        summary = distance_summary(routes_df)
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Routes", summary['count'])
        col2.metric("Airports", routes_df[['from_airport', 'to_airport']].stack().nunique())
        col3.metric("Mean Distance (km)", summary['mean'])
        col4.metric("Longest (km)", summary['max'])

        max_routes = st.slider("Routes to draw", 50, 5000, 500, step=50)
        st.plotly_chart(route_map_figure(flights, max_routes=max_routes), use_container_width=True)

        with st.expander("Projected arcs"):
            arcs = build_arcs(flights, SETTINGS.canvas_width, SETTINGS.canvas_height,
                              projection=SETTINGS.projection, dedupe=True)
            st.plotly_chart(arc_figure(arcs[:max_routes], SETTINGS.canvas_width, SETTINGS.canvas_height),
                            use_container_width=True)

        st.subheader("Longest Routes")
        st.dataframe(find_longest_routes(routes_df, top_n=10))
    else:
        st.error("Route data not found. Please run `flightmap` first.")


elif page == "Airport Explorer":
    st.title("🛫 Airport Explorer")

    if flights is not None and airport_kpi_df is not None:
        st.subheader("Busiest Airports")
        st.dataframe(find_busiest_airports(airport_kpi_df, top_n=10))

        # { 'London (LHR)': 'LHR', ... } for the dropdown
        labels = {f"{row.city} ({row.airport})": row.airport
                  for row in airport_kpi_df.sort_values('city').itertuples() if row.airport in flights}
        if labels:
            selected = st.selectbox("Airport", options=list(labels.keys()))
            airport_flights = {labels[selected]: flights[labels[selected]]}

            st.plotly_chart(route_map_figure(airport_flights), use_container_width=True)
            st.dataframe(pd.DataFrame([
                {'to': f.to_node.airport, 'city': f.to_node.city, 'country': f.to_node.country,
                 'distance': f.distance}
                for f in airport_flights[labels[selected]]
            ]))
        else:
            st.info("Flights are not grouped by airport code; re-run the pipeline with `--group-by from_airport`.")
    else:
        st.error("Airport KPIs not found. Please run `flightmap` first.")


elif page == "Airline Overview":
    st.title("🏢 Airline Overview")

    if airline_kpi_df is not None:
        top_n = st.slider("Airlines to show", 5, 50, 15)
        top = airline_kpi_df.head(top_n)
        st.bar_chart(top.set_index('airline')['routes'])
        st.dataframe(top)
    else:
        st.error("Airline KPIs not found. Please run `flightmap` first.")
