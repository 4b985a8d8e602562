"""
Chart Components
Plotly figures for progress and API usage.
"""

import plotly.graph_objects as go
import pandas as pd
from typing import List

from ..models import UserAchievementProgress


class ChartBuilder:
    """Build dashboard charts"""

    COLORS = {
        'bg': '#0a0e17',
        'paper': '#0f1419',
        'grid': '#1e2530',
        'text': '#e6edf3',
        'text_muted': '#7d8590',
        'done': '#3fb950',
        'accent': '#58a6ff',
        'accent2': '#a371f7',
        'accent3': '#f0883e',
    }

    METHOD_COLORS = {
        'GET': COLORS['accent'],
        'POST': COLORS['done'],
        'PATCH': COLORS['accent3'],
        'DELETE': COLORS['accent2'],
    }

    @staticmethod
    def get_layout_template() -> dict:
        """Get consistent layout template for all charts"""
        return {
            'paper_bgcolor': ChartBuilder.COLORS['paper'],
            'plot_bgcolor': ChartBuilder.COLORS['bg'],
            'font': {
                'family': 'JetBrains Mono, SF Mono, Consolas, monospace',
                'color': ChartBuilder.COLORS['text'],
                'size': 11
            },
            'margin': {'l': 60, 'r': 40, 't': 40, 'b': 40},
            'xaxis': {'gridcolor': ChartBuilder.COLORS['grid'], 'showgrid': True},
            'yaxis': {'gridcolor': ChartBuilder.COLORS['grid'], 'showgrid': True},
            'legend': {'orientation': 'h', 'y': 1.1},
        }

    @staticmethod
    def create_usage_chart(usage: pd.DataFrame, height: int = 320) -> go.Figure:
        """Stacked daily request counts per HTTP method"""
        fig = go.Figure()

        if usage.empty:
            fig.add_annotation(
                text="No API usage yet",
                showarrow=False,
                font={'color': ChartBuilder.COLORS['text_muted']},
            )
        else:
            daily = (
                usage.assign(day=pd.to_datetime(usage['date']).dt.date)
                .groupby(['day', 'method'], as_index=False)['count']
                .sum()
            )
            for method, group in daily.groupby('method'):
                fig.add_trace(go.Bar(
                    x=group['day'],
                    y=group['count'],
                    name=method,
                    marker_color=ChartBuilder.METHOD_COLORS.get(method, ChartBuilder.COLORS['accent']),
                ))

        fig.update_layout(
            **ChartBuilder.get_layout_template(),
            barmode='stack',
            height=height,
            title='API Requests per Day',
        )
        return fig

    @staticmethod
    def create_achievement_chart(records: List[UserAchievementProgress], height: int = 320) -> go.Figure:
        """Horizontal progress bars, one per tracked achievement"""
        names = []
        values = []
        colors = []
        for record in records:
            name = record.achievement.name if record.achievement else f"#{record.achievement_id}"
            # progress is a percentage
            pct = 100.0 if record.completed else float(min(max(record.progress, 0), 100))
            names.append(name)
            values.append(pct)
            colors.append(ChartBuilder.COLORS['done'] if record.completed else ChartBuilder.COLORS['accent'])

        fig = go.Figure(go.Bar(x=values, y=names, orientation='h', marker_color=colors))
        fig.update_layout(
            **ChartBuilder.get_layout_template(),
            height=height,
            title='Achievement Progress (%)',
        )
        fig.update_xaxes(range=[0, 100])
        return fig
