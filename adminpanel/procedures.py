from core.forms import LimitForm
from core.rpc import procedure
from . import dashboard, reports
from .forms import (
    DaysForm, MonthsForm, DateRangeForm, SalesReportForm, ProductReportForm, RevenueReportForm,
)


# ==================== DASHBOARD ====================

@procedure('dashboard.stats')
def dashboard_stats(data):
    return dashboard.get_dashboard_stats()


@procedure('dashboard.visitors', form=DaysForm)
def dashboard_visitors(data):
    return dashboard.get_daily_visitors(data.get('days') or 30)


@procedure('dashboard.revenue', form=MonthsForm)
def dashboard_revenue(data):
    return dashboard.get_revenue_by_month(data.get('months') or 12)


@procedure('dashboard.topProducts', form=LimitForm)
def dashboard_top_products(data):
    return dashboard.get_top_products(data.get('limit') or 10)


@procedure('dashboard.recentOrders', form=LimitForm)
def dashboard_recent_orders(data):
    return dashboard.get_recent_orders(data.get('limit') or 10)


@procedure('dashboard.customerStats')
def dashboard_customer_stats(data):
    return dashboard.get_customer_stats()


@procedure('dashboard.productStats')
def dashboard_product_stats(data):
    return dashboard.get_product_stats()


# ==================== REPORTS ====================

@procedure('reports.sales', form=SalesReportForm)
def reports_sales(data):
    report = reports.generate_sales_report(data['start_date'], data['end_date'])
    if data.get('format') == SalesReportForm.FORMAT_CSV:
        return reports.sales_report_csv(report)
    return report


@procedure('reports.products', form=ProductReportForm)
def reports_products(data):
    return reports.generate_product_report(data.get('category_id'), data.get('product_type'))


@procedure('reports.customers', form=DateRangeForm)
def reports_customers(data):
    return reports.generate_customer_report(data['start_date'], data['end_date'])


@procedure('reports.inventory')
def reports_inventory(data):
    return reports.generate_inventory_report()


@procedure('reports.revenue', form=RevenueReportForm)
def reports_revenue(data):
    return reports.generate_revenue_report(data['start_date'], data['end_date'], data['group_by'])


@procedure('reports.coupons')
def reports_coupons(data):
    return reports.generate_coupon_report()
