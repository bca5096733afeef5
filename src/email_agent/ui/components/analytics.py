"""
Analytics Tab Component

Outreach metrics, status and weekday charts and the follow-ups and
interviews coming up in the next week.
"""

import plotly.express as px
import streamlit as st

from ..utils.styling import STATUS_COLORS, create_metric_card

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

class AnalyticsTab:
    """Analytics tab component."""

    def __init__(self):
        self.tracker = st.session_state.tracker

    def render(self):
        """Render the analytics tab content."""
        st.markdown("### 📈 Analytics")

        if not len(self.tracker):
            st.info("No data yet. Analytics appear once applications are generated.")
            return

        summary = self.tracker.analytics()
        self._render_key_metrics(summary)

        col1, col2 = st.columns(2)
        with col1:
            self._render_status_chart()
        with col2:
            self._render_weekday_chart(summary.sends_by_weekday)

        col1, col2 = st.columns(2)
        with col1:
            self._render_upcoming("📅 Upcoming follow-ups", self.tracker.upcoming_follow_ups(), "follow_up_date")
        with col2:
            self._render_upcoming("🎤 Upcoming interviews", self.tracker.upcoming_interviews(), "interview_date")

    def _render_key_metrics(self, summary):
        cards = [
            (summary.total, "Total", None),
            (summary.sent, "Sent", "sent"),
            (f"{summary.response_rate:.1f}%", "Response Rate", "responded"),
            (f"{summary.interview_rate:.1f}%", "Interview Rate", "interview"),
            (f"{summary.success_rate:.0f}%", "Success Rate", None),
            (summary.sent_last_7_days, "Sent Last 7 Days", "generated"),
        ]
        for column, (value, label, status) in zip(st.columns(len(cards)), cards):
            with column:
                st.markdown(create_metric_card(value, label, status), unsafe_allow_html=True)

        st.caption(
            f"Pending {summary.pending} · Responded {summary.responded} · "
            f"Interviews {summary.interviews} · Rejected {summary.rejected} · Failed {summary.failed}"
        )

    def _render_status_chart(self):
        counts = {status: n for status, n in self.tracker.counts().items() if n}
        fig = px.pie(
            values=list(counts.values()),
            names=list(counts.keys()),
            title="Applications by Status",
            color=list(counts.keys()),
            color_discrete_map=STATUS_COLORS
        )
        fig.update_layout(height=320)
        st.plotly_chart(fig, width="stretch")

    def _render_weekday_chart(self, sends_by_weekday):
        if not sends_by_weekday:
            st.info("No emails sent yet.")
            return

        fig = px.bar(
            x=WEEKDAYS,
            y=[sends_by_weekday.get(day, 0) for day in WEEKDAYS],
            title="Emails Sent by Weekday",
            labels={"x": "Day", "y": "Emails"}
        )
        fig.update_layout(height=320)
        st.plotly_chart(fig, width="stretch")

    def _render_upcoming(self, title, records, attribute):
        st.markdown(f"#### {title}")
        if not records:
            st.caption("Nothing in the next 7 days.")
            return
        for record in records:
            st.write(f"**{record.company_name}** · {getattr(record, attribute).isoformat()}")
