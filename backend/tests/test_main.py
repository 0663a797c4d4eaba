import pytest

from planilla import models


def test_read_root(client):
    response = client.get('/')
    assert response.status_code == 200
    assert response.json() == {"message": "GT3 Planilla API"}


def test_employee_crud(client, make_employee):
    employee = make_employee()
    assert employee['base_salary'] == 320000
    assert employee['pay_period'] == 'quincenal'

    res = client.put(f"/api/empleados/{employee['id']}", json={'base_salary': 400000, 'email': 'ana@gt3.cr'})
    assert res.status_code == 200
    assert res.json()['base_salary'] == 400000
    assert res.json()['email'] == 'ana@gt3.cr'

    listed = client.get('/api/empleados/').json()
    assert [e['id'] for e in listed] == [employee['id']]

    assert client.delete(f"/api/empleados/{employee['id']}").status_code == 200
    assert client.get(f"/api/empleados/{employee['id']}").status_code == 404


def test_unknown_ids_are_404(client):
    assert client.get('/api/empleados/999').status_code == 404
    assert client.get('/api/planillas/999').status_code == 404
    assert client.get('/api/aumentos/999').status_code == 404
    assert client.get('/api/liquidaciones/999').status_code == 404
    assert client.get('/api/vacaciones/saldo/999').status_code == 404


def test_invalid_pay_period_rejected(client, company):
    res = client.post('/api/empleados/', json={
        'company_id': company['id'], 'name': 'X', 'pay_period': 'diario',
    })
    assert res.status_code == 422


def test_payroll_code_generated(make_payroll):
    payroll = make_payroll()
    assert payroll['code'].startswith('PL₡-GT3-Quin-')
    assert len(payroll['code'].rsplit('-', 1)[1]) == 6
    assert payroll['state'] == 'En Proceso'
    assert payroll['mail_sent'] is False


def test_duplicate_payroll_code_conflicts(make_payroll, client, company):
    make_payroll(code='PL-FIJA')
    res = client.post('/api/planillas/', json={'company_id': company['id'], 'code': 'PL-FIJA'})
    assert res.status_code == 409


def test_increase_amounts(client, make_employee, make_payroll):
    employee = make_employee(base_salary=500000)
    payroll = make_payroll()

    fixed = client.post('/api/aumentos/', json={
        'employee_id': employee['id'], 'payroll_id': payroll['id'], 'kind': 'monto', 'value': 20000,
    }).json()
    assert fixed['amount'] == 20000
    assert fixed['previous_salary'] == 500000
    assert fixed['new_salary'] == 520000
    assert fixed['effective_date'] == '2024-03-01'
    assert fixed['status'] == 'Pendiente'

    pct = client.post('/api/aumentos/', json={
        'employee_id': employee['id'], 'payroll_id': payroll['id'], 'kind': 'porcentaje', 'value': 10,
    }).json()
    assert pct['amount'] == 50000

    updated = client.put(f"/api/aumentos/{pct['id']}", json={'value': 5}).json()
    assert updated['amount'] == 25000


def test_overtime_amount_from_hours(client, make_employee, make_payroll):
    employee = make_employee()
    payroll = make_payroll()
    extra = client.post('/api/extras/', json={
        'employee_id': employee['id'], 'payroll_id': payroll['id'], 'hours': 10, 'rate': 4500,
    }).json()
    assert extra['amount'] == 45000

    updated = client.put(f"/api/extras/{extra['id']}", json={'hours': 2}).json()
    assert updated['amount'] == 9000


@pytest.mark.parametrize('status, expected', [
    (' aprobada ', 'Aprobado'),
    ('PROCESADO', 'Procesada'),
    ('Pendiente', 'Pendiente'),
])
def test_status_strings_are_normalised(client, make_employee, make_payroll, status, expected):
    employee = make_employee()
    payroll = make_payroll()
    res = client.post('/api/bonos/', json={
        'employee_id': employee['id'], 'payroll_id': payroll['id'], 'amount': 1000, 'status': status,
    })
    assert res.status_code == 200
    assert res.json()['status'] == expected


def test_unknown_status_rejected(client, make_employee, make_payroll):
    employee = make_employee()
    payroll = make_payroll()
    res = client.post('/api/rebajos/', json={
        'employee_id': employee['id'], 'payroll_id': payroll['id'], 'amount': 1000, 'status': 'archivado',
    })
    assert res.status_code == 422


def test_adjustment_filters(client, make_employee, make_payroll):
    ana = make_employee()
    luis = make_employee(name='Luis Solano', email='luis@example.com')
    first = make_payroll()
    second = make_payroll()
    for employee, payroll in ((ana, first), (luis, first), (ana, second)):
        client.post('/api/bonos/', json={
            'employee_id': employee['id'], 'payroll_id': payroll['id'], 'amount': 100,
        })

    assert len(client.get(f"/api/bonos/?planilla_id={first['id']}").json()) == 2
    assert len(client.get(f"/api/bonos/?empleado_id={ana['id']}").json()) == 2
    assert len(client.get(f"/api/bonos/?planilla_id={first['id']}&empleado_id={ana['id']}").json()) == 1


def _load_scenario(client, employee, payroll):
    ids = {'employee_id': employee['id'], 'payroll_id': payroll['id']}
    client.post('/api/aumentos/', json={**ids, 'kind': 'monto', 'value': 20000})
    client.post('/api/extras/', json={**ids, 'hours': 10, 'rate': 4500})
    client.post('/api/bonos/', json={**ids, 'amount': 14000})
    client.post('/api/rebajos/', json={**ids, 'amount': 120000})


def test_payroll_summary(client, make_employee, make_payroll):
    employee = make_employee()
    make_employee(name='Dolares', currency='dolares')
    payroll = make_payroll()
    _load_scenario(client, employee, payroll)

    res = client.get(f"/api/planillas/{payroll['id']}/resumen")
    assert res.status_code == 200
    data = res.json()

    assert len(data['rows']) == 1
    row = data['rows'][0]
    assert row['compensation_base'] == '₡160,000.00'
    assert row['devengado'] == '₡119,000.00'
    assert row['devengado_amount'] == 119000
    assert row['rtn'] == '₡1,600.00'
    assert row['social_charges'] == '₡150,000.00'

    totals = data['totals']
    assert totals['total_devengado'] == 119000
    assert totals['tarifa'] == pytest.approx(5950)
    assert totals['suma_rti'] == pytest.approx(1600)
    assert totals['iva'] == pytest.approx(16451.5)
    assert totals['total_facturar'] == pytest.approx(143001.5)


def test_rejected_records_left_out_of_summary(client, make_employee, make_payroll):
    employee = make_employee()
    payroll = make_payroll()
    client.post('/api/bonos/', json={
        'employee_id': employee['id'], 'payroll_id': payroll['id'], 'amount': 14000, 'status': 'Rechazado',
    })
    row = client.get(f"/api/planillas/{payroll['id']}/resumen").json()['rows'][0]
    assert row['devengado_amount'] == 160000


def test_approve_and_process(client, db, make_employee, make_payroll):
    employee = make_employee(base_salary=500000)
    payroll = make_payroll()
    ids = {'employee_id': employee['id'], 'payroll_id': payroll['id']}
    client.post('/api/aumentos/', json={**ids, 'kind': 'monto', 'value': 20000})
    client.post('/api/aumentos/', json={**ids, 'kind': 'monto', 'value': 5000})
    client.post('/api/bonos/', json={**ids, 'amount': 1000})

    approved = client.post(f"/api/planillas/{payroll['id']}/aplicar").json()
    assert approved['aprobados'] == {'increases': 2, 'overtime': 0, 'metric_bonuses': 1, 'deductions': 0}

    res = client.post(f"/api/planillas/{payroll['id']}/procesar")
    assert res.status_code == 200
    assert res.json()['state'] == 'Procesada'

    assert client.get(f"/api/empleados/{employee['id']}").json()['base_salary'] == 525000
    increases = client.get(f"/api/aumentos/?planilla_id={payroll['id']}").json()
    assert [i['status'] for i in increases] == ['Procesada', 'Procesada']
    assert [i['new_salary'] for i in increases] == [520000, 525000]
    assert db.query(models.MetricBonus).one().status == 'Procesada'

    again = client.post(f"/api/planillas/{payroll['id']}/procesar")
    assert again.status_code == 409


def test_closed_payroll_rejects_new_records(client, make_employee, make_payroll):
    employee = make_employee()
    payroll = make_payroll()
    client.post(f"/api/planillas/{payroll['id']}/procesar")
    res = client.post('/api/bonos/', json={
        'employee_id': employee['id'], 'payroll_id': payroll['id'], 'amount': 1000,
    })
    assert res.status_code == 409


def test_processed_payroll_records_are_frozen(client, make_employee, make_payroll):
    employee = make_employee(base_salary=320000)
    payroll = make_payroll()
    ids = {'employee_id': employee['id'], 'payroll_id': payroll['id']}
    increase = client.post('/api/aumentos/', json={**ids, 'kind': 'monto', 'value': 20000}).json()
    client.post(f"/api/planillas/{payroll['id']}/aplicar")
    client.post(f"/api/planillas/{payroll['id']}/procesar")

    res = client.put(f"/api/aumentos/{increase['id']}", json={'value': 50000, 'status': 'Pendiente'})
    assert res.status_code == 409
    assert client.delete(f"/api/aumentos/{increase['id']}").status_code == 409

    stored = client.get(f"/api/aumentos/{increase['id']}").json()
    assert stored['amount'] == 20000
    assert stored['status'] == 'Procesada'
    assert client.get(f"/api/empleados/{employee['id']}").json()['base_salary'] == 340000


def test_notify_processed_payroll(client, mailer, make_employee, make_payroll):
    employee = make_employee()
    make_employee(name='Sin Correo', email=None)
    payroll = make_payroll()
    _load_scenario(client, employee, payroll)

    early = client.post(f"/api/planillas/{payroll['id']}/notificar")
    assert early.status_code == 409

    client.post(f"/api/planillas/{payroll['id']}/aplicar")
    client.post(f"/api/planillas/{payroll['id']}/procesar")

    res = client.post(f"/api/planillas/{payroll['id']}/notificar")
    assert res.status_code == 200
    report = res.json()
    assert report['total'] == 2
    assert report['sent'] == 1
    failed = [r for r in report['results'] if not r['success']]
    assert failed[0]['error'] == 'Empleado no tiene correo configurado'

    assert len(mailer.sent) == 1
    assert mailer.sent[0]['to'] == 'ana@example.com'
    assert mailer.sent[0]['subject'] == f"Planilla de Compensación - {payroll['code']}"

    assert client.get(f"/api/planillas/{payroll['id']}").json()['mail_sent'] is True
    assert client.post(f"/api/planillas/{payroll['id']}/notificar").status_code == 409
    assert len(mailer.sent) == 1


def test_vacations_and_balance(client, make_employee):
    employee = make_employee()
    first = client.post('/api/vacaciones/', json={
        'employee_id': employee['id'], 'start_date': '2024-04-01', 'days': 2, 'status': 'Aprobado',
    })
    assert first.status_code == 200
    pending = client.post('/api/vacaciones/', json={
        'employee_id': employee['id'], 'start_date': '2024-05-01', 'days': 3,
    }).json()

    balance = client.get(f"/api/vacaciones/saldo/{employee['id']}").json()
    assert balance['enjoyed_days'] == 2

    client.put(f"/api/vacaciones/{pending['id']}", json={'status': 'aprobada'})
    balance = client.get(f"/api/vacaciones/saldo/{employee['id']}").json()
    assert balance['enjoyed_days'] == 5
    assert balance['remaining_days'] == -5

    client.delete(f"/api/vacaciones/{first.json()['id']}")
    assert client.get(f"/api/vacaciones/saldo/{employee['id']}").json()['enjoyed_days'] == 3
    assert len(client.get(f"/api/vacaciones/?empleado_id={employee['id']}").json()) == 1


def test_vacation_days_must_be_positive(client, make_employee):
    employee = make_employee()
    res = client.post('/api/vacaciones/', json={
        'employee_id': employee['id'], 'start_date': '2024-04-01', 'days': 0,
    })
    assert res.status_code == 422


def test_settlement_endpoint(client, make_employee):
    employee = make_employee(base_salary=600000, pay_period='mensual', hire_date='2023-01-01')
    res = client.get(f"/api/liquidaciones/{employee['id']}?fecha_salida=2023-12-31")
    assert res.status_code == 200
    data = res.json()
    assert data['days'] == 364
    assert data['notice_days'] == 30
    assert data['severance_days'] == 19.5
    assert data['average_monthly'] == pytest.approx(600000)
    assert data['aguinaldo'] == pytest.approx(600000)
    assert data['vacation_days'] == 1
    assert data['total'] == pytest.approx(1610000)
    assert data['total_formatted'] == '₡1,610,000.00'
    assert len(data['history']) == 6


def test_settlement_uses_remaining_vacation(client, db, make_employee):
    employee = make_employee(base_salary=600000, pay_period='mensual', hire_date='2023-01-01')
    db.add(models.VacationBalance(employee_id=employee['id'], assigned_days=5, enjoyed_days=2))
    db.commit()

    data = client.get(f"/api/liquidaciones/{employee['id']}?fecha_salida=2023-12-31").json()
    assert data['vacation_days'] == 3
    assert data['vacation_amount'] == pytest.approx(60000)


def test_settlement_ignores_overdrawn_vacation(client, db, make_employee):
    employee = make_employee(base_salary=600000, pay_period='mensual', hire_date='2023-01-01')
    db.add(models.VacationBalance(employee_id=employee['id'], assigned_days=2, enjoyed_days=5))
    db.commit()

    data = client.get(f"/api/liquidaciones/{employee['id']}?fecha_salida=2023-12-31").json()
    assert data['vacation_days'] == 0
    assert data['vacation_amount'] == 0
    assert data['total'] == pytest.approx(1590000)


def test_settlement_rejects_exit_before_hire(client, make_employee):
    employee = make_employee(hire_date='2023-01-01')
    res = client.get(f"/api/liquidaciones/{employee['id']}?fecha_salida=2022-12-31")
    assert res.status_code == 422
